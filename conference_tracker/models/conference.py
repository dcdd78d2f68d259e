"""Speaker and presentation models"""
from pydantic import BaseModel, EmailStr, Field


class SpeakerCreate(BaseModel):
    """New speaker"""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    email_address: EmailStr | None = None
    phone_number: str | None = Field(default=None, max_length=50)
    is_staff: bool = False


class SpeakerResponse(BaseModel):
    """Speaker"""

    id: int
    first_name: str
    last_name: str
    description: str | None
    email_address: str | None
    phone_number: str | None
    is_staff: bool

    model_config = {"from_attributes": True}


class PresentationCreate(BaseModel):
    """New presentation"""

    speaker_id: int
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None


class PresentationUpdate(BaseModel):
    """Editable presentation fields"""

    speaker_id: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None


class PresentationResponse(BaseModel):
    """Presentation"""

    id: int
    speaker_id: int
    title: str
    description: str | None

    model_config = {"from_attributes": True}
