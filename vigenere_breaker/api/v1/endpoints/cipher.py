from fastapi import APIRouter

from vigenere_breaker.api.v1.errors import to_http_exception
from vigenere_breaker.core.exceptions import CryptanalysisError
from vigenere_breaker.models.schemas import (
    DecryptRequest,
    DecryptResponse,
    EncryptRequest,
    EncryptResponse,
    ErrorResponse,
)
from vigenere_breaker.services.cipher import Alphabet, decrypt, encrypt

router = APIRouter()


@router.post(
    "/encrypt",
    response_model=EncryptResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid alphabet or key"}},
    summary="Encrypt plaintext",
    description="Encrypt plaintext with a known key. Useful for generating test ciphertexts.",
)
async def encrypt_plaintext(request: EncryptRequest) -> EncryptResponse:
    """
    Encrypt plaintext with the repeating key.

    Case is preserved and characters outside the alphabet pass through.
    """
    try:
        alphabet = Alphabet(request.alphabet)
        ciphertext = encrypt(request.plaintext, request.key, alphabet)
    except CryptanalysisError as e:
        raise to_http_exception(e)

    return EncryptResponse(
        ciphertext=ciphertext,
        key_used=request.key.upper(),
        alphabet=alphabet.symbols,
    )


@router.post(
    "/decrypt",
    response_model=DecryptResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid alphabet or key"}},
    summary="Decrypt ciphertext",
    description="Decrypt ciphertext with a known key.",
)
async def decrypt_ciphertext(request: DecryptRequest) -> DecryptResponse:
    try:
        alphabet = Alphabet(request.alphabet)
        plaintext = decrypt(request.ciphertext, request.key, alphabet)
    except CryptanalysisError as e:
        raise to_http_exception(e)

    return DecryptResponse(
        plaintext=plaintext,
        key_used=request.key.upper(),
        alphabet=alphabet.symbols,
    )
