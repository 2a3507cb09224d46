from typing import Optional
from pydantic import BaseModel, Field


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, pattern=r"^\+?\d{7,14}$")
    avatar_url: Optional[str] = Field(default=None, max_length=255)
