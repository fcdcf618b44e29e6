"""Shared HTTP lookup flow.

Every provider goes through the same steps: one GET, then classification
of what came back. Subclasses only describe their endpoint parameters and
how to read a 2xx payload.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from core.config import AppSettings
from core.domain.models import HttpError, LogicalError, LookupOutcome, TransportError

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_REASON = "invalid response payload"


def build_lookup_url(template: str, address: str) -> str:
    """Interpolate `address` into an endpoint template.

    Templates without a `{address}` placeholder get it appended as the last
    path segment.
    """

    quoted = quote(address.strip(), safe=":")
    if "{address}" in template:
        return template.replace("{address}", quoted)
    return f"{template.rstrip('/')}/{quoted}"


class HttpGeoLookup:
    """Base class for HTTP geolocation providers.

    The client is owned by the caller; one client is shared by every lookup
    of a run.
    """

    provider_name = "http"

    def __init__(self, settings: AppSettings, client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._client = client
        self._template = settings.resolved_endpoint()

    def query_params(self) -> dict[str, str]:
        return {}

    def parse_payload(self, payload: dict[str, Any]) -> LookupOutcome:
        raise NotImplementedError

    async def resolve(self, address: str) -> LookupOutcome:
        url = build_lookup_url(self._template, address)
        logger.debug("%s lookup for %s", self.provider_name, address)

        try:
            response = await self._client.get(url, params=self.query_params())
        except httpx.TimeoutException as exc:
            return TransportError(is_timeout=True, message=str(exc) or type(exc).__name__)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return TransportError(is_timeout=False, message=str(exc) or type(exc).__name__)

        if not response.is_success:
            return HttpError(
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        try:
            payload = response.json()
        except ValueError:
            return LogicalError(reason=INVALID_PAYLOAD_REASON)
        if not isinstance(payload, dict):
            return LogicalError(reason=INVALID_PAYLOAD_REASON)

        return self.parse_payload(payload)
