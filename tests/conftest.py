# tests/conftest.py
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402
from notifier import TelegramNotifier  # noqa: E402
from schemas import DeliveryResult  # noqa: E402


class RecordingTelegram:
    """httpx transport that stands in for api.telegram.org."""

    def __init__(self, status_code: int = 200, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json={"ok": self.status_code == 200})

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


class RecordingConfirmationSender:
    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.calls: List[tuple[str, str]] = []

    async def send_confirmation(self, email: str, child_name: str) -> DeliveryResult:
        self.calls.append((email, child_name))
        if self.ok:
            return DeliveryResult.delivered()
        return DeliveryResult.failed("smtp down")


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        telegram_bot_token="123:test-token",
        telegram_chat_id="-1001",
        confirmation_delay_s=0,
    )


@pytest.fixture()
def telegram() -> RecordingTelegram:
    return RecordingTelegram()


@pytest.fixture()
def notifier(settings: Settings, telegram: RecordingTelegram) -> TelegramNotifier:
    return TelegramNotifier(settings, transport=httpx.MockTransport(telegram))


@pytest.fixture()
def make_notifier(settings: Settings):
    def _make(status_code: int = 200, error: Exception | None = None):
        telegram = RecordingTelegram(status_code=status_code, error=error)
        return TelegramNotifier(settings, transport=httpx.MockTransport(telegram)), telegram

    return _make


@pytest.fixture()
def confirmations() -> RecordingConfirmationSender:
    return RecordingConfirmationSender()


@pytest.fixture()
def app(settings, notifier, confirmations):
    return create_app(settings, notifier=notifier, confirmation_sender=confirmations)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def valid_payload() -> Dict[str, Any]:
    return {
        "parentName": "Jane Doe",
        "childName": "Tom Doe",
        "childAge": 5,
        "email": "A@Example.com",
        "phone": "+81-90-1234-5678",
        "preferredProgram": "toddlers",
        "message": "",
    }


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run `async def` tests on a fresh event loop."""
    if not asyncio.iscoroutinefunction(pyfuncitem.obj):
        return None
    kwargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
    asyncio.run(pyfuncitem.obj(**kwargs))
    return True
