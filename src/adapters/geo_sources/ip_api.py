"""Lookup source: ip-api.com.

Payload shape: `{status, message, country, countryCode}`. Only
`status == "success"` counts as a resolved address; the free tier rejects
private and reserved ranges with `status == "fail"` and a message.
"""

from __future__ import annotations

from typing import Any

from adapters.geo_sources.base import HttpGeoLookup
from core.domain.models import LogicalError, LookupOutcome, LookupSuccess

FIELDS = "status,message,country,countryCode"
FALLBACK_REASON = "lookup failed"


class IpApiLookup(HttpGeoLookup):
    provider_name = "ip-api"

    def query_params(self) -> dict[str, str]:
        return {"fields": FIELDS}

    def parse_payload(self, payload: dict[str, Any]) -> LookupOutcome:
        if payload.get("status") != "success":
            message = payload.get("message")
            if isinstance(message, str) and message.strip():
                return LogicalError(reason=message.strip())
            return LogicalError(reason=FALLBACK_REASON)

        # Short code wins over the full country name.
        for key in ("countryCode", "country"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return LookupSuccess(country_code=value.strip())

        return LogicalError(reason=FALLBACK_REASON)
