"""Pydantic schemas for the auth endpoints."""

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    uid: str = Field(..., min_length=1, max_length=64)
    display_name: str | None = Field(None, max_length=64)


class UserInfo(BaseModel):
    uid: str
    display_name: str | None


class SignInResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserInfo
    balance: int
    is_new_user: bool
