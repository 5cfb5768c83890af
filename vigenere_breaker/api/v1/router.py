from fastapi import APIRouter

from vigenere_breaker.api.v1.endpoints import attacks, cipher

api_router = APIRouter()

api_router.include_router(
    attacks.router,
    prefix="/attacks",
    tags=["Attacks"],
)

api_router.include_router(
    cipher.router,
    prefix="/cipher",
    tags=["Cipher"],
)
