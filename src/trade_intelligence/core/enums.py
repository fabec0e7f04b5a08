"""Enumerations used across the trade intelligence engine."""

from enum import Enum


class TradeOutcome(str, Enum):
    WIN = "Win"
    LOSS = "Loss"
    BREAKEVEN = "BreakEven"
    PENDING = "Pending"

    @classmethod
    def _missing_(cls, value: object) -> "TradeOutcome | None":
        # Journal rows store "BE" and mixed casing
        if not isinstance(value, str):
            return None
        key = value.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        if key == "be":
            return cls.BREAKEVEN
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


class ZoneValidity(str, Enum):
    VALID = "Valid"
    INVALID = "Invalid"
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value: object) -> "ZoneValidity | None":
        if not isinstance(value, str):
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        # Free-text zone states other than Valid/Invalid
        return cls.UNKNOWN


class MarketSession(str, Enum):
    """Five-band display sessions (UTC)."""

    ASIAN = "asian"
    LONDON = "london"
    OVERLAP_LONDON_NY = "overlap_london_ny"
    NEW_YORK = "new_york"
    OFF_HOURS = "off_hours"


class PnlSession(str, Enum):
    """Three-band sessions used for P&L attribution."""

    LONDON = "London"
    NY = "NY"
    ASIA = "Asia"


class ProfitFactorMode(str, Enum):
    LEGACY = "legacy"      # |totalPl| / |totalPl - finalEquity|, kept for compatibility
    STANDARD = "standard"  # gross profit / gross loss


class RuleCategory(str, Enum):
    SUBJECTIVE = "subjective"
    RISK_EXECUTION = "risk_execution"
    CONTEXT = "context"


class RuleType(str, Enum):
    ENTRY_CONFIRMATION_REQUIRED = "ENTRY_CONFIRMATION_REQUIRED"
    SETUP_PRESENT = "SETUP_PRESENT"
    PERSONAL_MODEL_CONFIRMED = "PERSONAL_MODEL_CONFIRMED"
    SL_REQUIRED = "SL_REQUIRED"
    TP_REQUIRED = "TP_REQUIRED"
    MAX_RISK_PERCENT = "MAX_RISK_PERCENT"
    MIN_RISK_REWARD = "MIN_RISK_REWARD"
    MAX_TRADES_PER_DAY = "MAX_TRADES_PER_DAY"
    SESSION_ALLOWED = "SESSION_ALLOWED"
    TIME_WINDOW_ALLOWED = "TIME_WINDOW_ALLOWED"
    DIRECTIONAL_BIAS_REQUIRED = "DIRECTIONAL_BIAS_REQUIRED"
