import re
import string
import secrets

from components.core.exceptions import InvalidInput

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_RE = re.compile(r"^\d{6}$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    """Validate an email address and return it lower-cased."""
    email = (email or "").strip().lower()
    if not EMAIL_RE.match(email):
        raise InvalidInput("Please enter a valid email address")
    return email


def validate_new_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def validate_otp_format(otp: str) -> None:
    if not OTP_RE.match(otp or ""):
        raise InvalidInput("Invalid OTP format. Please enter a 6-digit code.")


def generate_otp(length: int = 6) -> str:
    """Function is generate a random numeric one-time code"""
    return "".join(secrets.choice(string.digits) for i in range(length))
