from .schemas import (
    CredentialRecord,
    MailboxCredentials,
    MessageSummary,
    PlatformAccount,
    RefreshResponse,
    RefreshSettings,
)

__all__ = [
    "CredentialRecord",
    "MailboxCredentials",
    "MessageSummary",
    "PlatformAccount",
    "RefreshResponse",
    "RefreshSettings",
]
