"""Geolocation lookup contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Lets the filter pipeline run against ip-api, ipinfo or a test fake
  without knowing which one it has.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

from core.domain.models import LookupOutcome

Sleeper = Callable[[float], Awaitable[None]]


@runtime_checkable
class GeoLookup(Protocol):
    """Minimal contract for a lookup source.

    Design rules:
    - `resolve` is async because it does network I/O.
    - It never raises: every failure comes back as an outcome variant.
    - Exactly one request per call; no retries.
    """

    async def resolve(self, address: str) -> LookupOutcome:
        """Look up `address` and return the classified outcome."""

        ...
