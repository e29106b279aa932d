from __future__ import annotations

from typing import List, Optional

import httpx
from pydantic import ValidationError

from token_refresher.config import HTTP_TIMEOUT, logger
from token_refresher.errors import AuthenticationError, FetchError
from token_refresher.models import MessageSummary
from token_refresher.shared import read_json_object

MESSAGES_COLLECTION_KEY = "hydra:member"


class MailboxClient:
    """mail.tm compatible REST client used to read the OTP email."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def authenticate(self, address: str, password: str) -> str:
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self._base_url}/token",
                    json={"address": address, "password": password},
                )
        except httpx.RequestError as exc:
            logger.error("Request error authenticating mailbox %s: %s", address, exc)
            raise AuthenticationError(f"Mail.tm auth failed: {exc}") from exc

        if not response.is_success:
            logger.error("Mailbox auth for %s returned HTTP %s", address, response.status_code)
            raise AuthenticationError(
                f"Mail.tm auth failed: {response.status_code}",
                status_code=response.status_code,
            )

        data = read_json_object(response)
        if data is None:
            logger.error("Mailbox auth for %s returned a non-object body", address)
            raise AuthenticationError("Mail.tm auth failed: invalid response body", status_code=response.status_code)

        token = data.get("token")
        if not token:
            logger.error("No token in mailbox auth response for %s", address)
            raise AuthenticationError("Mail.tm auth failed: no token in response", status_code=response.status_code)
        logger.info("Mailbox session opened for %s", address)
        return token

    async def list_messages(self, bearer_token: str) -> List[MessageSummary]:
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self._base_url}/messages",
                    headers={"Authorization": f"Bearer {bearer_token}"},
                )
        except httpx.RequestError as exc:
            logger.error("Request error listing mailbox messages: %s", exc)
            raise FetchError(f"Failed to fetch emails: {exc}") from exc

        if not response.is_success:
            logger.error("Mailbox listing returned HTTP %s", response.status_code)
            raise FetchError(
                f"Failed to fetch emails: {response.status_code}",
                status_code=response.status_code,
            )

        data = read_json_object(response)
        items = data.get(MESSAGES_COLLECTION_KEY) if data is not None else None
        if data is None or not isinstance(items or [], list):
            logger.error("Mailbox listing returned an unexpected body")
            raise FetchError("Failed to fetch emails: invalid response body", status_code=response.status_code)

        messages: List[MessageSummary] = []
        for position, item in enumerate(items or []):
            try:
                messages.append(MessageSummary.model_validate(item))
            except ValidationError as exc:
                # 只读取最新一封，较旧的异常条目跳过
                if position == 0:
                    logger.error("Newest mailbox message is malformed: %s", exc)
                    raise FetchError("Failed to fetch emails: malformed message", status_code=response.status_code) from exc
                logger.warning("Skipping malformed mailbox message at position %s", position)
        logger.info("Mailbox returned %s message(s)", len(messages))
        return messages


__all__ = ["MESSAGES_COLLECTION_KEY", "MailboxClient"]
