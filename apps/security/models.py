from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date

class User(SQLModel, table=True):
    """Application user; id is auto-incremented by the database."""
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_name: str = Field(unique=True, index=True, max_length=100)
    full_name: str = Field(index=True, max_length=200)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    email: Optional[str] = Field(default=None, max_length=320)
    profile_picture_uri: Optional[str] = Field(default=None, max_length=1024)
    date_of_birth: date
    address: Optional[str] = Field(default=None, max_length=500)
    hashed_password: str
