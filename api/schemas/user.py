"""
User-related Pydantic schemas.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, PastDate, field_validator

from filmorate.models import User


class UserBase(BaseModel):
    """Fields shared by user create and update requests."""

    email: EmailStr
    login: str = Field(..., description="Non-blank, without whitespace")
    name: Optional[str] = Field(None, description="Defaults to login when blank")
    birthday: PastDate

    @field_validator("login")
    @classmethod
    def login_without_whitespace(cls, value: str) -> str:
        if not value or any(ch.isspace() for ch in value):
            raise ValueError("login must be non-blank and contain no whitespace")
        return value

    def to_user(self, user_id: Optional[int] = None) -> User:
        return User(
            id=user_id,
            email=self.email,
            login=self.login,
            name=self.name,
            birthday=self.birthday,
        )


class UserCreate(UserBase):
    """Request to create a user."""


class UserUpdate(UserBase):
    """Request to replace an existing user, identified by ``id``."""

    id: int = Field(..., description="User ID")

    def to_user(self, user_id: Optional[int] = None) -> User:
        return super().to_user(self.id)


class UserResponse(BaseModel):
    """User with the ids of their friends."""

    id: int
    email: str
    login: str
    name: str
    birthday: date
    friends: List[int] = []

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            login=user.login,
            name=user.name,
            birthday=user.birthday,
            friends=sorted(user.friends),
        )
