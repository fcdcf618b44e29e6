"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts and headers for every lookup provider.
- Makes testing easy: callers can hand in a client built on
  `httpx.MockTransport` instead.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(settings: AppSettings | None = None) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    The timeout always comes from settings, so no lookup can hang longer
    than `http_timeout_seconds` even when the host enforces nothing.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
    )
