from __future__ import annotations

from typing import Optional


class TokenRefreshError(Exception):
    """Base class for every failure that aborts a refresh run."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message


class AuthenticationError(TokenRefreshError):
    """Mailbox provider rejected the credentials."""


class FetchError(TokenRefreshError):
    """Mailbox listing failed."""


class DispatchError(TokenRefreshError):
    """GameHub refused to send the OTP email."""


class OTPNotFoundError(TokenRefreshError):
    """No OTP code could be found in the mailbox."""


class LoginError(TokenRefreshError):
    """GameHub rejected the OTP login."""


class MissingTokenError(TokenRefreshError):
    """GameHub accepted the login but returned no token."""


class TokenStoreError(Exception):
    """Stored credential record could not be read."""


NotFoundError = OTPNotFoundError


__all__ = [
    "AuthenticationError",
    "DispatchError",
    "FetchError",
    "LoginError",
    "MissingTokenError",
    "NotFoundError",
    "OTPNotFoundError",
    "TokenRefreshError",
    "TokenStoreError",
]
