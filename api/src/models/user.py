"""
User account models.

Pydantic schemas for registration, login and profile updates, plus the
row model returned by the user repository.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserDB(BaseModel):
    """User row as stored in the ``users`` table."""
    username: str
    password: str
    name: str
    token: Optional[str] = None


class RegisterUserRequest(BaseModel):
    """Register user request schema."""
    username: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Username"
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Password"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "edo",
                "password": "rahasia",
                "name": "Edo Sibua"
            }
        }
    }


class LoginUserRequest(BaseModel):
    """Login request schema."""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=100)


class UpdateUserRequest(BaseModel):
    """Update current user; only supplied fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1, max_length=100)


class UserResponse(BaseModel):
    """User information response schema. ``token`` is only set on login."""
    username: str
    name: str
    token: Optional[str] = None

    @classmethod
    def from_db(cls, user: UserDB, include_token: bool = False) -> "UserResponse":
        return cls(
            username=user.username,
            name=user.name,
            token=user.token if include_token else None
        )
