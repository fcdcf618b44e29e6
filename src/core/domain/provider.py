"""Geolocation provider contracts.

The two supported services answer with incompatible payload shapes, so the
provider is always an explicit choice rather than something guessed from
the response.
"""

from __future__ import annotations

from enum import Enum


class GeoProvider(str, Enum):
    """Supported lookup services."""

    IP_API = "ip-api"
    IPINFO = "ipinfo"

    @property
    def default_endpoint(self) -> str:
        if self is GeoProvider.IPINFO:
            return "https://ipinfo.io/{address}/json"
        return "http://ip-api.com/json/{address}"

    @property
    def requires_credential(self) -> bool:
        return self is GeoProvider.IPINFO

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return "ipinfo.io" if self is GeoProvider.IPINFO else "ip-api.com"
