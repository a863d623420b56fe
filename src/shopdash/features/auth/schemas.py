"""Pydantic schemas for authentication, defining the structure for request and response data."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    sub: Optional[str] = None


class PinRequest(BaseModel):
    pin: str = Field(..., min_length=1, max_length=12, description="Admin PIN")


class AuthStatus(BaseModel):
    is_authenticated: bool
    username_password_verified: bool
    expires_in: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdminNameResponse(BaseModel):
    full_name: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdminProfileResponse(BaseModel):
    """Admin profile with secrets masked by asterisks of the same length."""

    full_name: str
    username: str
    password: str
    pin: str


class AdminUpdate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=8, description="New password, unchanged if omitted")
    pin: Optional[str] = Field(None, min_length=4, max_length=12, description="New PIN, unchanged if omitted")


class MessageResponse(BaseModel):
    message: str
