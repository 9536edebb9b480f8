from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    password: str | None = None
    turnstile_token: str | None = Field(default=None, alias="turnstileToken")


class LoginResponse(BaseModel):
    token: str
