"""Action API payloads used during bot-password login."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ActionApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LoginTokens(ActionApiModel):
    logintoken: str | None = None


class TokensQuery(ActionApiModel):
    tokens: LoginTokens = Field(default_factory=LoginTokens)


class LoginTokenResponse(ActionApiModel):
    query: TokensQuery = Field(default_factory=TokensQuery)


class LoginResult(ActionApiModel):
    result: str
    lgusername: str | None = None
    reason: str | None = None


class LoginResponse(ActionApiModel):
    login: LoginResult | None = None
