"""Request/response shapes of the security module."""

from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from framework.config import settings
from framework.query import DynamicQueryDto


class UserResponse(BaseModel):
    """Public projection of a User (no password hash)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_name: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    profile_picture_uri: Optional[str] = None
    date_of_birth: date
    address: Optional[str] = None


class UserProfile(BaseModel):
    """Editable profile fields; PUT replaces all of them."""
    full_name: str = Field(min_length=1, max_length=200)
    phone_number: Optional[str] = None
    email: Optional[str] = None
    profile_picture_uri: Optional[str] = None
    date_of_birth: date
    address: Optional[str] = None


class RegisterSchema(UserProfile):
    user_name: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6)


class LoginSchema(BaseModel):
    user_name: str
    password: str


class UserQuerySchema(DynamicQueryDto):
    """Dynamic query body with the API page and page-size caps applied."""
    page: int = Field(default=1, le=settings.MAX_PAGE)
    size: int = settings.DEFAULT_PAGE_SIZE

    @field_validator("size")
    @classmethod
    def check_size(cls, value: int) -> int:
        if value > settings.MAX_PAGE_SIZE:
            raise ValueError(f"size must be <= {settings.MAX_PAGE_SIZE}")
        return value
