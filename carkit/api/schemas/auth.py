from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class IdentityTokenRequest(BaseModel):
    identity_token: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class AuthUserResponse(BaseModel):
    id: str
    provider: str
    email: str | None
    created_at: datetime


class AuthTokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    access_expires_at: datetime
    refresh_expires_at: datetime
    user: AuthUserResponse
