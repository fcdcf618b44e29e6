"""Geolocation relabeling pipeline.

This module is the entry point the conversion pipeline calls. It drives
the lookups strictly one after another, in input order, and keeps every
per-node failure inside a relabeled node. Printing and progress bars stay
in the CLI layer through `FilterHooks`.
"""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Mapping, MutableMapping, Sequence

import httpx
from pydantic import ValidationError

from adapters.geo_sources import build_lookup_client
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import (
    LookupOutcome,
    Node,
    RateConfig,
    RunSummary,
    TransportError,
)
from core.interfaces.lookup import GeoLookup, Sleeper
from core.services.label_rewriter import rewrite_label
from core.services.rate_scheduler import RateScheduler

logger = logging.getLogger(__name__)

_NAME_KEYS = ("name", "displayName", "display_name")


@dataclass
class FilterHooks:
    """Optional callbacks for UI layers (progress, per-node results)."""

    progress: Callable[[int, int, Node], None] | None = None
    outcome: Callable[[int, Node, LookupOutcome], None] | None = None


def log_run_banner(summary: RunSummary, config: RateConfig) -> None:
    logger.info(
        "Relabeling %d nodes: delay %d ms (~%.1f req/min, provider limit %d/min), estimated %.1f s",
        summary.node_count,
        config.request_delay_ms,
        config.effective_limit_per_minute,
        config.reference_limit_per_minute,
        summary.estimated_total_ms / 1000,
    )
    if summary.exceeds_ceiling:
        logger.warning(
            "Estimated run time %.1f s exceeds the %.1f s execution ceiling; "
            "the host may terminate the run before it finishes",
            summary.estimated_total_ms / 1000,
            summary.ceiling_ms / 1000,
        )


def _log_outcome(node: Node, outcome: LookupOutcome) -> None:
    if outcome.kind == "success":
        logger.debug("%s resolved to %s", node.address, outcome.country_code)
    elif outcome.kind == "logical_error":
        logger.warning("%s rejected by lookup service: %s", node.address, outcome.reason)
    elif outcome.kind == "http_error":
        logger.error(
            "%s lookup failed with HTTP %d %s",
            node.address,
            outcome.status_code,
            outcome.status_text,
        )
    elif outcome.is_timeout:
        logger.error("%s lookup timed out: %s", node.address, outcome.message)
    else:
        logger.error("%s lookup raised: %s", node.address, outcome.message)


async def _safe_resolve(lookup: GeoLookup, address: str) -> LookupOutcome:
    try:
        return await lookup.resolve(address)
    except Exception as exc:
        logger.exception("Unexpected lookup failure for %s", address)
        return TransportError(is_timeout=False, message=str(exc) or type(exc).__name__)


async def relabel_nodes(
    nodes: Sequence[Node],
    *,
    lookup: GeoLookup,
    scheduler: RateScheduler,
    hooks: FilterHooks | None = None,
) -> list[Node]:
    """Resolve every node in order and return relabeled copies.

    Input models are left untouched. Output has the same length and order
    as the input.
    """

    hooks = hooks or FilterHooks()
    total = len(nodes)
    if total == 0:
        return []

    log_run_banner(scheduler.summarize(total), scheduler.config)

    counts: Counter[str] = Counter()
    results: list[Node] = []
    for index, node in enumerate(nodes):
        logger.info("[%d/%d] processing %s", index + 1, total, node.address)
        if hooks.progress:
            hooks.progress(index, total, node)

        outcome = await _safe_resolve(lookup, node.address)
        _log_outcome(node, outcome)
        counts[outcome.kind] += 1

        relabeled = node.model_copy(
            update={"display_name": rewrite_label(node.display_name, outcome)}
        )
        results.append(relabeled)
        if hooks.outcome:
            hooks.outcome(index, relabeled, outcome)

        await scheduler.pace(index, total)

    logger.info(
        "Relabeled %d nodes: %d resolved, %d rejected, %d HTTP errors, %d transport errors",
        total,
        counts["success"],
        counts["logical_error"],
        counts["http_error"],
        counts["transport_error"],
    )
    return results


@asynccontextmanager
async def _client_scope(
    settings: AppSettings,
    client: httpx.AsyncClient | None,
) -> AsyncIterator[httpx.AsyncClient]:
    # A caller-provided client stays open; ours is closed with the run.
    if client is not None:
        yield client
        return
    async with build_async_client(settings) as owned:
        yield owned


def _parse_descriptor(raw: Mapping[str, Any]) -> Node | None:
    try:
        return Node.model_validate(dict(raw))
    except ValidationError as exc:
        logger.warning(
            "Leaving descriptor unchanged, it has no usable server/name (%d validation errors)",
            exc.error_count(),
        )
        return None


def _write_name(descriptor: MutableMapping[str, Any], name: str) -> None:
    for key in _NAME_KEYS:
        if key in descriptor:
            descriptor[key] = name
            return
    descriptor["name"] = name


async def filter_nodes(
    nodes: Sequence[Mapping[str, Any]],
    params: Mapping[str, Any] | None = None,
    *,
    settings: AppSettings | None = None,
    client: httpx.AsyncClient | None = None,
    sleep: Sleeper | None = None,
    hooks: FilterHooks | None = None,
) -> list[dict[str, Any]]:
    """Relabel raw node descriptors for the conversion pipeline.

    `params` is the pipeline's own parameter object; it is accepted for
    interface compatibility and not interpreted. Returned descriptors are
    copies, in input order, with only the name key changed. Descriptors
    that cannot be parsed come back unchanged and cost no lookup.
    """

    if not nodes:
        return []
    if params:
        logger.debug("Ignoring pipeline parameters: %s", sorted(params))

    settings = settings or AppSettings()
    parsed = [_parse_descriptor(raw) for raw in nodes]
    valid = [node for node in parsed if node is not None]

    relabeled: list[Node] = []
    if valid:
        scheduler = RateScheduler.from_settings(settings, sleep=sleep)
        async with _client_scope(settings, client) as http:
            lookup = build_lookup_client(settings, http)
            relabeled = await relabel_nodes(valid, lookup=lookup, scheduler=scheduler, hooks=hooks)

    results = iter(relabeled)
    out: list[dict[str, Any]] = []
    for raw, node in zip(nodes, parsed):
        descriptor = dict(raw)
        if node is not None:
            _write_name(descriptor, next(results).display_name)
        out.append(descriptor)
    return out


async def filter_node(
    node: MutableMapping[str, Any],
    *,
    settings: AppSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Per-node host contract: relabel `node` in place and keep it.

    Always returns True; a failed lookup only changes the label. There is no
    pacing here: a host calling this once per node gets no rate limiting,
    so batches that need it go through `filter_nodes`.
    """

    settings = settings or AppSettings()
    parsed = _parse_descriptor(node)
    if parsed is None:
        return True

    async with _client_scope(settings, client) as http:
        lookup = build_lookup_client(settings, http)
        outcome = await _safe_resolve(lookup, parsed.address)
    _log_outcome(parsed, outcome)
    _write_name(node, rewrite_label(parsed.display_name, outcome))
    return True
