"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to I/O libraries.
- Node descriptors arrive as loose dicts from the conversion pipeline; the
  model normalizes their key names and carries every other key through.

Note:
- These models describe *what* the data is, not *how* it is fetched.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import AliasChoices, BaseModel, Field, computed_field, field_validator
from pydantic.config import ConfigDict


class Node(BaseModel):
    """A proxy/server descriptor with an address and a mutable display label.

    Only `display_name` is ever rewritten. Unknown keys (port, type,
    cipher, ...) are kept as extras so the caller gets its descriptor back
    intact.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    address: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("server", "address"),
        description="Server IP or hostname used for the lookup.",
    )
    display_name: str = Field(
        ...,
        validation_alias=AliasChoices("name", "displayName", "display_name"),
        description="Nominal label on input, annotated label on output.",
    )

    @field_validator("address")
    @classmethod
    def _address_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("address must not be blank")
        return value


class LookupSuccess(BaseModel):
    """The service resolved the address to a location."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    country_code: str = Field(
        ...,
        min_length=1,
        description="Short country code, or a space-joined location string.",
    )


class LogicalError(BaseModel):
    """The service answered 2xx but rejected the query (private IP, quota...)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["logical_error"] = "logical_error"
    reason: str = Field(..., description="Service-provided message or a generic fallback.")


class HttpError(BaseModel):
    """The service answered with a non-2xx status; the body is ignored."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["http_error"] = "http_error"
    status_code: int
    status_text: str = ""


class TransportError(BaseModel):
    """The request never completed (DNS, connection refused, timeout)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["transport_error"] = "transport_error"
    is_timeout: bool = False
    message: str = ""


LookupOutcome = Annotated[
    Union[LookupSuccess, LogicalError, HttpError, TransportError],
    Field(discriminator="kind"),
]


class RateConfig(BaseModel):
    """Pacing parameters, resolved once per invocation."""

    model_config = ConfigDict(frozen=True)

    request_delay_ms: int = Field(
        ...,
        gt=0,
        description="Pause inserted between two consecutive lookups.",
    )
    reference_limit_per_minute: int = Field(
        default=45,
        gt=0,
        description="Provider's documented limit (informational).",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_limit_per_minute(self) -> float:
        return 60_000 / self.request_delay_ms


class RunSummary(BaseModel):
    """Pre-run estimate, used for the banner only."""

    model_config = ConfigDict(frozen=True)

    node_count: int = Field(..., ge=0)
    estimated_total_ms: int = Field(..., ge=0)
    ceiling_ms: int = Field(..., gt=0)
    exceeds_ceiling: bool = False
