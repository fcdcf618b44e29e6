"""Lookup source: ipinfo.io.

Payload shape: `{country, region, city, ...}` with no status field. A
present `country` means success; region and city are appended when set.
The token travels as the `token` query parameter.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.geo_sources.base import HttpGeoLookup
from core.config import AppSettings
from core.domain.models import LogicalError, LookupOutcome, LookupSuccess

logger = logging.getLogger(__name__)

FALLBACK_REASON = "no location data"


def join_location(*parts: object) -> str:
    """Join non-empty location fields with single spaces."""

    return " ".join(p.strip() for p in parts if isinstance(p, str) and p.strip())


class IpInfoLookup(HttpGeoLookup):
    provider_name = "ipinfo"

    def __init__(self, settings: AppSettings, client: httpx.AsyncClient) -> None:
        super().__init__(settings, client)
        self._token = settings.credential()
        if self._token is None:
            logger.warning("No ipinfo token configured; lookups run anonymously")

    def query_params(self) -> dict[str, str]:
        if self._token is None:
            return {}
        return {"token": self._token}

    def parse_payload(self, payload: dict[str, Any]) -> LookupOutcome:
        location = join_location(
            payload.get("country"),
            payload.get("region"),
            payload.get("city"),
        )
        if isinstance(payload.get("country"), str) and payload["country"].strip():
            return LookupSuccess(country_code=location)

        error = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message") or error.get("title")
            if isinstance(message, str) and message.strip():
                return LogicalError(reason=message.strip())
        if payload.get("bogon"):
            return LogicalError(reason="bogon address")
        return LogicalError(reason=FALLBACK_REASON)
