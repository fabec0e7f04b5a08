"""Trade record models consumed by the engine.

A TradeRecord is one closed (or pending) journal row as loaded by the
storage layer.  A TradeIntent is the pre-trade execution checklist sent
before a trade is logged.  Both accept the snake_case field names used
in Python and the camelCase keys produced by the journal API, so request
bodies and database rows can be passed through unchanged.

All timestamps are normalised to timezone-aware UTC; naive values are
taken to already be UTC.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from trade_intelligence.core.enums import TradeOutcome, ZoneValidity
from trade_intelligence.core.errors import InvalidInput

_DATETIME = TypeAdapter(datetime)

NO_STRATEGY = "Unknown"


def to_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive input is assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: datetime | str) -> datetime:
    """Parse a datetime or ISO-8601 string into an aware UTC datetime.

    Raises
    ------
    InvalidInput
        If *value* cannot be interpreted as a timestamp.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    try:
        return to_utc(_DATETIME.validate_python(value))
    except ValidationError as exc:
        raise InvalidInput(f"unparseable timestamp {value!r}", field="timestamp") from exc


def coerce_model(model: type[BaseModel], obj: Any) -> Any:
    """Validate *obj* into *model*, re-raising failures as ``InvalidInput``."""
    if isinstance(obj, model):
        return obj
    try:
        if isinstance(obj, Mapping):
            return model.model_validate(dict(obj))
        return model.model_validate(obj, from_attributes=True)
    except ValidationError as exc:
        err = exc.errors()[0]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        raise InvalidInput(err.get("msg", str(exc)), field=loc) from exc


class TradeRecord(BaseModel):
    """One journal trade as seen by the performance aggregator."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    trade_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("trade_id", "tradeId", "id"),
    )
    timestamp: datetime = Field(
        validation_alias=AliasChoices("timestamp", "createdAt", "created_at"),
    )
    net_pl: float = Field(allow_inf_nan=False)
    outcome: TradeOutcome = TradeOutcome.PENDING
    risk_reward: float | None = Field(default=None, allow_inf_nan=False)
    setup: str | None = None

    # Optional risk / sizing context
    risk_percent: float | None = Field(default=None, allow_inf_nan=False)
    lot_size: float | None = Field(default=None, allow_inf_nan=False)

    # Descriptive only
    pair: str | None = None
    direction: str | None = None
    stop_loss: float | None = None
    take_profit: float | None = None

    @field_validator("trade_id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        # Serial integer ids from the journal table
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("timestamp")
    @classmethod
    def _normalise_timestamp(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_validator("outcome", mode="before")
    @classmethod
    def _parse_outcome(cls, v: Any) -> Any:
        if v is None or v == "":
            return TradeOutcome.PENDING
        if isinstance(v, str) and not isinstance(v, TradeOutcome):
            try:
                return TradeOutcome(v)
            except ValueError:
                return v
        return v

    @field_validator(
        "risk_reward", "risk_percent", "lot_size", "stop_loss", "take_profit",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        # Numeric columns arrive as "" when unset
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("net_pl", "risk_reward", "risk_percent", "lot_size", mode="before")
    @classmethod
    def _reject_bool(cls, v: Any) -> Any:
        # Lax float parsing would turn true/false into 1.0/0.0
        if isinstance(v, bool):
            raise ValueError("expected a number, got a boolean")
        return v

    @field_validator("setup")
    @classmethod
    def _strip_setup(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    # ------------------------------------------------------------------ #
    # Derived                                                              #
    # ------------------------------------------------------------------ #

    @property
    def has_strategy(self) -> bool:
        """False when no setup was declared (missing or the placeholder)."""
        return self.setup is not None and self.setup != NO_STRATEGY

    @property
    def setup_key(self) -> str:
        """Bucket key for per-setup statistics."""
        return self.setup if self.setup is not None else NO_STRATEGY

    @classmethod
    def coerce(cls, obj: Any) -> TradeRecord:
        """Build a TradeRecord from a mapping, ORM row or existing record.

        Raises
        ------
        InvalidInput
            If the timestamp or P&L cannot be interpreted.
        """
        return coerce_model(cls, obj)


class TradeIntent(BaseModel):
    """Pre-trade execution checklist submitted for validation."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    htf_bias_clear: bool = False
    zone_valid: bool = False
    liquidity_taken: bool = False
    structure_confirmed: bool = False
    entry_confirmed: bool = False
    zone_validity: ZoneValidity | None = None

    pair: str | None = None
    direction: str | None = None
    htf_bias: str | None = Field(
        default=None,
        validation_alias=AliasChoices("htf_bias", "htfBias", "HTFBias"),
    )

    @field_validator("zone_validity", mode="before")
    @classmethod
    def _parse_zone_validity(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        if isinstance(v, str) and not isinstance(v, ZoneValidity):
            try:
                return ZoneValidity(v)
            except ValueError:
                return v
        return v

    @classmethod
    def coerce(cls, obj: Any) -> TradeIntent:
        """Build a TradeIntent from a mapping or existing intent."""
        return coerce_model(cls, obj)
