"""Display-name annotation.

Pure function of (original name, outcome). Re-running it on an already
annotated name adds another prefix instead of replacing the old one.
"""

from __future__ import annotations

from core.domain.models import (
    HttpError,
    LogicalError,
    LookupOutcome,
    LookupSuccess,
    TransportError,
)


def rewrite_label(original_name: str, outcome: LookupOutcome) -> str:
    if isinstance(outcome, LookupSuccess):
        return f"Real:{outcome.country_code}***-Nominal:{original_name}"
    if isinstance(outcome, LogicalError):
        return f"[{outcome.reason}]-{original_name}"
    if isinstance(outcome, HttpError):
        return f"[HTTP query failed]-{original_name}"
    if isinstance(outcome, TransportError):
        if outcome.is_timeout:
            return f"[query exception-timeout]-{original_name}"
        return f"[query exception]-{original_name}"
    raise TypeError(f"Unsupported lookup outcome: {type(outcome).__name__}")
