# classroom_app/core/security.py
"""Password hashing and generation."""
import secrets
import string

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_password(length: int = 10) -> str:
    """Random password for newly created accounts"""
    return ''.join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))
