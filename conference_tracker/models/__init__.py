"""Pydantic models - API contracts"""

from conference_tracker.models.auth import (
    RegisterConfirmation,
    Token,
    UserLogin,
    UserRegister,
    UserResponse,
)
from conference_tracker.models.common import APIResponse, ErrorDetail
from conference_tracker.models.conference import (
    PresentationCreate,
    PresentationResponse,
    PresentationUpdate,
    SpeakerCreate,
    SpeakerResponse,
)

__all__ = [
    "APIResponse",
    "ErrorDetail",
    "PresentationCreate",
    "PresentationResponse",
    "PresentationUpdate",
    "RegisterConfirmation",
    "SpeakerCreate",
    "SpeakerResponse",
    "Token",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]
