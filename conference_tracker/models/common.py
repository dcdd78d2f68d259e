"""Common response models"""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """Error detail"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(default=None, description="Extra detail")


class APIResponse(BaseModel, Generic[T]):
    """Uniform response envelope"""

    success: bool = Field(..., description="Whether the call succeeded")
    data: T | None = Field(default=None, description="Payload")
    error: ErrorDetail | None = Field(default=None, description="Error information")
    message: str | None = Field(default=None, description="Human readable message")

    @classmethod
    def ok(cls, data: T | None = None, message: str | None = None) -> "APIResponse[T]":
        """Success response"""
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "APIResponse[None]":
        """Failure response"""
        return cls(
            success=False,
            error=ErrorDetail(code=code, message=message, details=details),
        )
