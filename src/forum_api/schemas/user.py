"""Pydantic schemas for session and authentication API endpoints."""

from pydantic import BaseModel, Field, field_validator

from forum_api.schemas.common import CamelModel
from forum_api.services.totp import is_well_formed_code


class LoginRequest(BaseModel):
    """Schema for a username/password login."""

    username: str = Field(description="Username")
    password: str = Field(description="Password")


class SessionInfo(CamelModel):
    """What the client learns about its own session."""

    user_id: int = Field(description="User ID")
    username: str = Field(description="Username")
    is_admin: bool = Field(description="Whether the user is an administrator")
    second_factor_available: bool = Field(description="Whether the user has a TOTP secret")
    second_factor_completed: bool = Field(description="Whether this session passed TOTP")


class TotpRequest(BaseModel):
    """Schema for submitting a second-factor code."""

    code: str = Field(description="6-digit TOTP code")

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Trim surrounding whitespace and require exactly six digits."""
        v = v.strip()
        if not is_well_formed_code(v):
            raise ValueError("Code must be exactly 6 digits")
        return v


class TotpResponse(BaseModel):
    """Schema for a successful second-factor completion."""

    status: str = Field(default="authorized", description="Always 'authorized'")
