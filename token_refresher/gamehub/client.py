from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

import httpx

from token_refresher.config import HTTP_TIMEOUT, logger
from token_refresher.errors import DispatchError, LoginError, MissingTokenError
from token_refresher.models import PlatformAccount
from token_refresher.shared import read_json_object

from .signing import generate_signature

SUCCESS_CODE = 200
OTP_EVENT = "register"
# /ems/send 不校验签名，原样发送占位值
DISPATCH_SIGN_PLACEHOLDER = "any"


def timestamp_ms() -> str:
    return str(int(time.time() * 1000))


class GameHubClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], str] = timestamp_ms,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._clock = clock

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            return await client.post(f"{self._base_url}{path}", json=payload)

    async def request_otp_dispatch(self, account: PlatformAccount) -> None:
        payload = {
            "sign": DISPATCH_SIGN_PLACEHOLDER,
            "time": self._clock(),
            "event": OTP_EVENT,
            "clientparams": account.clientparams,
            "email": account.email,
            "token": "",
        }
        try:
            response = await self._post("/ems/send", payload)
        except httpx.RequestError as exc:
            logger.error("Request error sending OTP for %s: %s", account.email, exc)
            raise DispatchError(f"OTP request failed: {exc}") from exc

        if not response.is_success:
            logger.error("OTP dispatch for %s returned HTTP %s", account.email, response.status_code)
            raise DispatchError(f"OTP request failed: {response.status_code}", status_code=response.status_code)

        data = read_json_object(response)
        if data is None:
            logger.error("OTP dispatch for %s returned a non-object body", account.email)
            raise DispatchError("OTP request failed: invalid response body", status_code=response.status_code)
        if data.get("code") != SUCCESS_CODE:
            message = data.get("msg")
            logger.error("OTP dispatch for %s rejected: code=%s msg=%s", account.email, data.get("code"), message)
            raise DispatchError(f"OTP request failed: {message}", server_message=message)
        logger.info("OTP email requested for %s", account.email)

    async def login(self, otp: str, account: PlatformAccount, secret_key: str) -> str:
        timestamp = self._clock()
        params = {
            "captcha": otp,
            "clientparams": account.clientparams,
            "email": account.email,
            "time": timestamp,
        }
        payload = {
            "captcha": otp,
            "sign": generate_signature(params, secret_key),
            "time": timestamp,
            "clientparams": account.clientparams,
            "email": account.email,
        }
        try:
            response = await self._post("/email/login", payload)
        except httpx.RequestError as exc:
            logger.error("Request error logging in %s: %s", account.email, exc)
            raise LoginError(f"Login failed: {exc}") from exc

        if not response.is_success:
            logger.error("Login for %s returned HTTP %s", account.email, response.status_code)
            raise LoginError(f"Login failed: {response.status_code}", status_code=response.status_code)

        data = read_json_object(response)
        if data is None:
            logger.error("Login for %s returned a non-object body", account.email)
            raise LoginError("Login failed: invalid response body", status_code=response.status_code)
        if data.get("code") != SUCCESS_CODE:
            message = data.get("msg")
            logger.error("Login for %s rejected: code=%s msg=%s", account.email, data.get("code"), message)
            raise LoginError(f"Login failed: {message}", server_message=message)

        payload_data = data.get("data")
        userinfo = payload_data.get("userinfo") if isinstance(payload_data, dict) else None
        token = userinfo.get("token") if isinstance(userinfo, dict) else None
        if not token:
            logger.error("No token in login response for %s", account.email)
            raise MissingTokenError("No token in login response")
        logger.info("GameHub login succeeded for %s", account.email)
        return token


__all__ = ["DISPATCH_SIGN_PLACEHOLDER", "GameHubClient", "OTP_EVENT", "SUCCESS_CODE", "timestamp_ms"]
