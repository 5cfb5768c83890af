from fastapi import HTTPException, status

from vigenere_breaker.core.exceptions import (
    AttackNotFoundError,
    AttackStateError,
    CryptanalysisError,
)
from vigenere_breaker.models.schemas import ErrorResponse


def to_http_exception(error: CryptanalysisError) -> HTTPException:
    """Map an engine error to an HTTP error with an ``ErrorResponse`` body."""
    if isinstance(error, AttackNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, AttackStateError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST

    body = ErrorResponse(error=error.kind, message=error.message, details=error.details)
    return HTTPException(status_code=code, detail=body.model_dump(mode="json"))
