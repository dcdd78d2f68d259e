"""
Security helpers
- password hashing
- access token and e-mail confirmation token issuing and validation
"""
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from conference_tracker.core.config import Settings

ACCESS_TOKEN = "access"
EMAIL_CONFIRMATION_TOKEN = "email_confirmation"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _encode(settings: Settings, claims: dict[str, Any]) -> str:
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(
    settings: Settings,
    subject: str | Any,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Issue an access token for a signed-in user"""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode = {
        "sub": str(subject),
        "exp": expire,
        "type": ACCESS_TOKEN,
    }
    if extra_claims:
        to_encode.update(extra_claims)

    return _encode(settings, to_encode)


def create_email_confirmation_token(settings: Settings, subject: str | Any) -> str:
    """Issue the code a new account uses to confirm its e-mail address"""
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.EMAIL_CONFIRMATION_EXPIRE_HOURS)
    return _encode(
        settings,
        {"sub": str(subject), "exp": expire, "type": EMAIL_CONFIRMATION_TOKEN},
    )


def decode_token(
    settings: Settings,
    token: str,
    expected_type: str | None = None,
) -> dict[str, Any] | None:
    """Decode and verify a token; None when invalid, expired or of the wrong type"""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    if expected_type is not None and payload.get("type") != expected_type:
        return None
    return payload
