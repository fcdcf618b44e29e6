"""Lookup sources (concrete providers).

Why a package:
- One module per provider contract (ip-api, ipinfo).
- Each module implements `core.interfaces.lookup.GeoLookup`.
"""

from __future__ import annotations

import httpx

from adapters.geo_sources.base import HttpGeoLookup, build_lookup_url
from adapters.geo_sources.ip_api import IpApiLookup
from adapters.geo_sources.ipinfo import IpInfoLookup
from core.config import AppSettings
from core.domain.provider import GeoProvider

_PROVIDERS: dict[GeoProvider, type[HttpGeoLookup]] = {
	GeoProvider.IP_API: IpApiLookup,
	GeoProvider.IPINFO: IpInfoLookup,
}


def build_lookup_client(settings: AppSettings, client: httpx.AsyncClient) -> HttpGeoLookup:
	"""Instantiate the lookup source selected by `settings.provider`."""

	return _PROVIDERS[settings.provider](settings, client)


__all__ = [
	"HttpGeoLookup",
	"IpApiLookup",
	"IpInfoLookup",
	"build_lookup_client",
	"build_lookup_url",
]
