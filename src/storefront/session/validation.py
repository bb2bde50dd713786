"""Input checks for sign-in forms, applied before any auth call."""

import re

from protean.exceptions import ValidationError

COUNTRY_CODE = "+91"
MIN_PASSWORD_LENGTH = 6

_MOBILE = re.compile(r"^[6-9]\d{9}$")
_CODE = re.compile(r"^\d{6}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_phone(phone: str) -> str:
    """Return ``+91XXXXXXXXXX`` for a 10-digit Indian mobile number."""
    digits = re.sub(r"[\s-]", "", phone or "")
    if digits.startswith(COUNTRY_CODE):
        digits = digits[len(COUNTRY_CODE):]
    if not _MOBILE.match(digits):
        raise ValidationError({"phone": ["Enter a valid 10-digit mobile number"]})
    return f"{COUNTRY_CODE}{digits}"


def validate_code(code: str) -> str:
    code = (code or "").strip()
    if not _CODE.match(code):
        raise ValidationError({"code": ["Enter the 6-digit code"]})
    return code


def validate_credentials(email: str, password: str) -> str:
    email = (email or "").strip().lower()
    if not _EMAIL.match(email):
        raise ValidationError({"email": ["Enter a valid email address"]})
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
    return email
