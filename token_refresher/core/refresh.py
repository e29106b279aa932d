"""GameHub token refresh flow.

One run authenticates the mail.tm inbox, asks GameHub to email an OTP, waits a
fixed settle delay, reads the newest message, and logs in with the code. The
credential record is stored only after the whole run succeeds.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from token_refresher import config
from token_refresher.config import logger
from token_refresher.errors import OTPNotFoundError
from token_refresher.gamehub import GameHubClient
from token_refresher.mailbox import MailboxClient, extract_otp
from token_refresher.models import CredentialRecord, MailboxCredentials, PlatformAccount, RefreshSettings
from token_refresher.storage import JsonFileTokenStore, TokenStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"


class TokenRefreshService:
    def __init__(
        self,
        mailbox: MailboxClient,
        gamehub: GameHubClient,
        store: TokenStore,
        settings: RefreshSettings,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._mailbox = mailbox
        self._gamehub = gamehub
        self._store = store
        self._settings = settings
        self._sleep = sleep
        self._now = now
        # 默认不加锁：并发运行会争用同一邮箱与账号
        self._run_lock: Optional[asyncio.Lock] = asyncio.Lock() if settings.serialize_runs else None

    @property
    def store(self) -> TokenStore:
        return self._store

    @property
    def store_key(self) -> str:
        return self._settings.store_key

    async def refresh(self) -> CredentialRecord:
        if self._run_lock is None:
            return await self._refresh_and_store()
        async with self._run_lock:
            return await self._refresh_and_store()

    async def _refresh_and_store(self) -> CredentialRecord:
        token = await self.run_refresh()
        record = self.build_record(token)
        self._store.put(self._settings.store_key, record.model_dump(mode="json"))
        logger.info("Token refreshed and stored: %s", mask_token(token))
        return record

    async def run_refresh(self) -> str:
        settings = self._settings

        logger.info("Step 1: authenticating with mail.tm")
        session_token = await self._mailbox.authenticate(settings.mailbox.address, settings.mailbox.password)

        logger.info("Step 2: requesting OTP from GameHub")
        await self._gamehub.request_otp_dispatch(settings.account)

        logger.info("Step 3: waiting %.1fs for OTP email", settings.settle_delay)
        await self._sleep(settings.settle_delay)

        logger.info("Step 4: fetching OTP from inbox")
        messages = await self._mailbox.list_messages(session_token)
        if not messages:
            logger.warning("Inbox is empty after settle delay")
            raise OTPNotFoundError("No OTP email received")
        otp = extract_otp(messages[0].intro)

        logger.info("Step 5: logging in with OTP")
        token = await self._gamehub.login(otp, settings.account, settings.secret_key)

        logger.info("Step 6: token obtained")
        return token

    def build_record(self, token: str) -> CredentialRecord:
        refreshed_at = self._now()
        return CredentialRecord(
            token=token,
            refreshed_at=refreshed_at,
            expires_at=refreshed_at + timedelta(hours=self._settings.token_lifetime_hours),
        )


def load_settings() -> RefreshSettings:
    return RefreshSettings(
        mailbox=MailboxCredentials(address=config.MAILTM_EMAIL, password=config.MAILTM_PASSWORD),
        account=PlatformAccount(email=config.GAMEHUB_EMAIL, clientparams=config.GAMEHUB_CLIENTPARAMS),
        secret_key=config.GAMEHUB_SECRET_KEY,
        settle_delay=config.SETTLE_DELAY_SECONDS,
        token_lifetime_hours=config.TOKEN_LIFETIME_HOURS,
        store_key=config.TOKEN_STORE_KEY,
        serialize_runs=config.REFRESH_SERIALIZE_RUNS,
    )


def build_refresh_service(store: TokenStore | None = None) -> TokenRefreshService:
    return TokenRefreshService(
        MailboxClient(config.MAILTM_API_BASE),
        GameHubClient(config.GAMEHUB_API_BASE),
        store if store is not None else JsonFileTokenStore(config.TOKEN_STORE_FILE),
        load_settings(),
    )


__all__ = ["TokenRefreshService", "build_refresh_service", "load_settings", "mask_token", "utc_now"]
