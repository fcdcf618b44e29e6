"""Request pacing.

The scheduler sleeps a fixed `request_delay_ms` between two lookups and
never after the last one. The sleep does not subtract the lookup's own
latency, so the real spacing is `request_delay_ms + latency`; that extra
time is the margin kept below the provider's actual limit.
"""

from __future__ import annotations

import asyncio

from core.config import AppSettings
from core.domain.models import RateConfig, RunSummary
from core.interfaces.lookup import Sleeper


class RateScheduler:
    """Paces a sequential loop and estimates its total duration."""

    def __init__(
        self,
        config: RateConfig,
        *,
        ceiling_ms: int = 50_000,
        sleep: Sleeper | None = None,
    ) -> None:
        self._config = config
        self._ceiling_ms = ceiling_ms
        self._sleep = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings: AppSettings, *, sleep: Sleeper | None = None) -> "RateScheduler":
        config = RateConfig(
            request_delay_ms=settings.request_delay_ms,
            reference_limit_per_minute=settings.reference_limit_per_minute,
        )
        return cls(config, ceiling_ms=settings.execution_ceiling_ms, sleep=sleep)

    @property
    def config(self) -> RateConfig:
        return self._config

    def summarize(self, node_count: int) -> RunSummary:
        """Estimate the run and flag when it may outlive the host ceiling."""

        estimated = node_count * self._config.request_delay_ms
        return RunSummary(
            node_count=node_count,
            estimated_total_ms=estimated,
            ceiling_ms=self._ceiling_ms,
            exceeds_ceiling=estimated > self._ceiling_ms,
        )

    async def pace(self, index: int, total: int) -> None:
        """Suspend before the next lookup, unless `index` is the last one."""

        if index >= total - 1:
            return
        await self._sleep(self._config.request_delay_ms / 1000)
