"""Core module"""
from conference_tracker.core.config import Settings, get_settings
from conference_tracker.core.security import (
    create_access_token,
    create_email_confirmation_token,
    decode_token,
    get_password_hash,
    verify_password,
)

__all__ = [
    "Settings",
    "get_settings",
    "create_access_token",
    "create_email_confirmation_token",
    "decode_token",
    "verify_password",
    "get_password_hash",
]
