"""Shared fixtures: isolated settings, fake clock and mocked HTTP clients."""

from __future__ import annotations

import os
from typing import Callable

import httpx
import pytest

from core.config import AppSettings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep developer env vars and .env files out of the tests."""

    for key in list(os.environ):
        if key.upper().startswith("NODEGEO_") or key.upper() == "IPINFO_TOKEN":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings() -> Callable[..., AppSettings]:
    def _make(**overrides) -> AppSettings:
        return AppSettings(_env_file=None, **overrides)

    return _make


class FakeClock:
    """Zero-cost replacement for asyncio.sleep that records every call."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []
        self.events: list[str] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.events.append(f"sleep:{seconds}")
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by `handler`."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
