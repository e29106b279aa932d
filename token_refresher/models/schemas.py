from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MailboxCredentials(BaseModel):
    address: str
    password: str


class PlatformAccount(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "player@mail.tm",
                "clientparams": "5.1.0|16|en|...",
            }
        }
    )

    email: str
    clientparams: str


class MessageSummary(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    subject: Optional[str] = None
    intro: str = ""
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @field_validator("intro", mode="before")
    @classmethod
    def _intro_or_empty(cls, value: object) -> object:
        return "" if value is None else value


class CredentialRecord(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "token": "abcXYZ",
                "refreshed_at": "2025-01-01T00:00:00+00:00",
                "expires_at": "2025-01-02T00:00:00+00:00",
            }
        }
    )

    token: str
    refreshed_at: datetime
    expires_at: datetime


class RefreshSettings(BaseModel):
    mailbox: MailboxCredentials
    account: PlatformAccount
    secret_key: str
    settle_delay: float = 5.0
    token_lifetime_hours: int = 24
    store_key: str = "gamehub_token"
    serialize_runs: bool = False


class RefreshResponse(BaseModel):
    success: bool = True
    token: str
    refreshed_at: datetime
