"""Pre-trade checklist validation.

Rules are data: an ordered tuple of (rule_id, predicate, reason).  The
validator walks them in order and stops at the first failure, so a
given intent always reports the same single reason.  Callers rely on
that order being stable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from trade_intelligence.core.enums import ZoneValidity
from trade_intelligence.journal.record import TradeIntent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradeRule:
    """One checklist precondition."""

    rule_id: str
    check: Callable[[TradeIntent], bool]
    reason: str


TRADE_RULES: tuple[TradeRule, ...] = (
    TradeRule("htf_bias_clear", lambda i: i.htf_bias_clear, "HTF bias not clear"),
    TradeRule("zone_valid", lambda i: i.zone_valid, "Zone not valid"),
    TradeRule("liquidity_taken", lambda i: i.liquidity_taken, "Liquidity not taken"),
    TradeRule(
        "structure_confirmed", lambda i: i.structure_confirmed, "Structure not confirmed"
    ),
    TradeRule(
        "entry_confirmed", lambda i: i.entry_confirmed, "Entry confirmation missing"
    ),
    # Independent of zone_valid: the zone may have been invalidated since
    TradeRule(
        "zone_not_invalidated",
        lambda i: i.zone_validity != ZoneValidity.INVALID,
        "Zone invalidated",
    ),
)


@dataclass(frozen=True)
class ValidationResult:
    """Verdict for one trade intent; ``reason`` is empty when valid."""

    valid: bool
    reason: str = ""
    rule_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "reason": self.reason}


def validate_trade_intent(intent: TradeIntent | Any) -> ValidationResult:
    """Check *intent* against the ordered checklist.

    Raises
    ------
    InvalidInput
        If *intent* is structurally invalid (e.g. a non-boolean checklist
        value).  A failed rule is not an error: it yields ``valid=False``.
    """
    checked = TradeIntent.coerce(intent)
    for rule in TRADE_RULES:
        if not rule.check(checked):
            logger.debug("Trade intent rejected by %s", rule.rule_id)
            return ValidationResult(valid=False, reason=rule.reason, rule_id=rule.rule_id)
    return ValidationResult(valid=True)
