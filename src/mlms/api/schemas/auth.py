"""API schemas for registration, login and password changes.

Fields are optional at the schema level on purpose: a missing name/email/password is
reported by AuthService with a readable message instead of pydantic's error list.
"""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request schema for account registration."""

    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email (.com/.edu/.org/.net)")
    password: str | None = Field(default=None, description="Password, at most 72 bytes")
    role: str | None = Field(
        default=None, description="'admin' to create an admin, anything else is a regular user"
    )
    subscription_plan: str | None = Field(
        default=None, description="Optional plan; starts a 30 day subscription"
    )


class RegisterResponse(BaseModel):
    message: str
    user_id: int


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: str | None = None
    password: str | None = None


class UserInfo(BaseModel):
    id: int
    name: str
    email: str
    role: str


class LoginResponse(BaseModel):
    """Session token plus who it belongs to."""

    token: str = Field(..., description="Bearer token, valid for 60 minutes")
    user: UserInfo


class ChangePasswordRequest(BaseModel):
    old_password: str | None = None
    new_password: str | None = None
