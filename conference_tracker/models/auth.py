"""Identity models"""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserRegister(BaseModel):
    """Registration request"""

    email: EmailStr = Field(..., description="E-mail address")
    password: str = Field(..., min_length=8, max_length=100, description="Password")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain a digit")
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain a letter")
        return v


class UserLogin(BaseModel):
    """Login request"""

    email: EmailStr = Field(..., description="E-mail address")
    password: str = Field(..., description="Password")


class UserResponse(BaseModel):
    """User information"""

    id: UUID
    email: EmailStr
    email_confirmed: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisterConfirmation(BaseModel):
    """
    Result of a registration.

    No e-mail sender is configured, so the confirmation link is handed back
    directly.
    """

    user: UserResponse
    confirmation_url: str = Field(..., description="Link that confirms the account")


class Token(BaseModel):
    """Access token"""

    access_token: str = Field(..., description="Access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Lifetime in seconds")
