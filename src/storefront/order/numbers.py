"""Human-readable order numbers: ``ORD`` + epoch millis + 5 base36 chars."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_uppercase
MAX_ATTEMPTS = 5


def generate_order_number() -> str:
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(5))
    return f"ORD{int(time.time() * 1000)}{suffix}"


def unique_order_number(exists, generate=generate_order_number) -> str:
    """Draw numbers until ``exists`` rejects none of them.

    Raises ``RuntimeError`` after ``MAX_ATTEMPTS`` collisions in a row.
    """
    for _ in range(MAX_ATTEMPTS):
        number = generate()
        if not exists(number):
            return number
    raise RuntimeError(f"Could not allocate a unique order number after {MAX_ATTEMPTS} attempts")
