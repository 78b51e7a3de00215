"""Random promotion code generation."""

import secrets
from typing import Callable

from .config import DEFAULT_CODE_ALPHABET

CODE_LENGTH = 6


def generate_code(length: int = CODE_LENGTH, alphabet: str = DEFAULT_CODE_ALPHABET) -> str:
    """Draw ``length`` symbols uniformly and independently from ``alphabet``.

    Codes are not checked for uniqueness; Stripe rejects duplicates with a 400,
    which the minter treats as a retry.
    """
    if length <= 0:
        raise ValueError("Code length must be greater than zero")
    if not alphabet:
        raise ValueError("Code alphabet must not be empty")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def code_factory(length: int = CODE_LENGTH, alphabet: str = DEFAULT_CODE_ALPHABET) -> Callable[[], str]:
    """Return a zero-argument generator bound to ``length`` and ``alphabet``."""

    def _generate() -> str:
        return generate_code(length, alphabet)

    return _generate
