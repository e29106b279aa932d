"""Shared pytest fixtures."""

import json
from typing import Any, Callable

import httpx
import pytest

from token_refresher.models import MailboxCredentials, PlatformAccount, RefreshSettings
from token_refresher.storage import JsonFileTokenStore


def json_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content.decode("utf-8"))


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.fixture
def account() -> PlatformAccount:
    return PlatformAccount(email="player@mail.tm", clientparams="5.1.0|16|en")


@pytest.fixture
def settings(account: PlatformAccount) -> RefreshSettings:
    return RefreshSettings(
        mailbox=MailboxCredentials(address="player@mail.tm", password="hunter2"),
        account=account,
        secret_key="s3cret",
        settle_delay=5.0,
    )


@pytest.fixture
def store(tmp_path) -> JsonFileTokenStore:
    return JsonFileTokenStore(str(tmp_path / "token_store.json"))
