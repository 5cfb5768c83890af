"""Alphabet and Vigenère transform."""

from vigenere_breaker.services.cipher.alphabet import Alphabet, validate
from vigenere_breaker.services.cipher.vigenere import PreparedText, decrypt, encrypt, key_shifts

__all__ = [
    "Alphabet",
    "PreparedText",
    "decrypt",
    "encrypt",
    "key_shifts",
    "validate",
]
