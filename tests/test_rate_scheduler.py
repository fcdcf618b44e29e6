"""Pacing and run-time estimation."""

import pytest
from pydantic import ValidationError

from core.domain.models import RateConfig
from core.services.rate_scheduler import RateScheduler


class TestRateConfig:
    def test_effective_limit_is_derived(self):
        config = RateConfig(request_delay_ms=1500, reference_limit_per_minute=45)

        assert config.effective_limit_per_minute == pytest.approx(40.0)

    def test_zero_delay_rejected(self):
        with pytest.raises(ValidationError):
            RateConfig(request_delay_ms=0)


class TestSummarize:
    def test_estimate_under_ceiling(self):
        scheduler = RateScheduler(RateConfig(request_delay_ms=1000), ceiling_ms=50_000)

        summary = scheduler.summarize(10)

        assert summary.node_count == 10
        assert summary.estimated_total_ms == 10_000
        assert summary.exceeds_ceiling is False

    def test_estimate_over_ceiling_is_flagged(self):
        scheduler = RateScheduler(RateConfig(request_delay_ms=1500), ceiling_ms=50_000)

        summary = scheduler.summarize(40)

        assert summary.estimated_total_ms == 60_000
        assert summary.exceeds_ceiling is True

    def test_exactly_at_ceiling_is_not_flagged(self):
        scheduler = RateScheduler(RateConfig(request_delay_ms=1000), ceiling_ms=5_000)

        assert scheduler.summarize(5).exceeds_ceiling is False

    def test_from_settings(self, make_settings):
        settings = make_settings(request_delay_ms=2000, execution_ceiling_ms=3000)
        scheduler = RateScheduler.from_settings(settings)

        assert scheduler.config.request_delay_ms == 2000
        assert scheduler.summarize(2).exceeds_ceiling is True


class TestPace:
    async def test_sleeps_between_nodes(self, fake_clock):
        scheduler = RateScheduler(RateConfig(request_delay_ms=250), sleep=fake_clock.sleep)

        for index in range(3):
            await scheduler.pace(index, 3)

        assert fake_clock.sleeps == [0.25, 0.25]

    async def test_no_sleep_after_last_node(self, fake_clock):
        scheduler = RateScheduler(RateConfig(request_delay_ms=250), sleep=fake_clock.sleep)

        await scheduler.pace(0, 1)

        assert fake_clock.sleeps == []
