"""Strategy compliance: evaluate a logged trade against a user's rules.

Unlike the pre-trade checklist, every configured rule is evaluated and
reported, so a trade can carry several violations.  Rules are
declarative (rule type + expected value); the catalogue below defines
each type's category, input kind and default.

Inputs missing from :class:`TradeInputs` fall back to what the trade
record or checklist already says (stop loss set, R:R, HTF bias, ...).
The current session, when not supplied, is derived from the trade
timestamp with the five-band scheme.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from trade_intelligence.core.enums import MarketSession, RuleCategory, RuleType
from trade_intelligence.journal.record import TradeIntent, TradeRecord, coerce_model
from trade_intelligence.journal.sessions import classify_session

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

# Labels offered by the rule editor that differ from session values
_SESSION_ALIASES = {"overlap": MarketSession.OVERLAP_LONDON_NY.value}


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleTypeDefinition:
    key: RuleType
    label: str
    description: str
    category: RuleCategory
    input_type: str  # boolean | number | multiselect | time_range
    default_value: Any = None
    comparator: str = ""  # gte | lte for number rules


RULE_TYPE_CATALOG: dict[RuleType, RuleTypeDefinition] = {
    d.key: d
    for d in (
        RuleTypeDefinition(
            RuleType.ENTRY_CONFIRMATION_REQUIRED, "Entry Confirmation Required",
            "Require specific entry confirmation before taking a trade",
            RuleCategory.SUBJECTIVE, "boolean", True,
        ),
        RuleTypeDefinition(
            RuleType.SETUP_PRESENT, "Setup Present",
            "A valid setup must be identified before entry",
            RuleCategory.SUBJECTIVE, "boolean", True,
        ),
        RuleTypeDefinition(
            RuleType.PERSONAL_MODEL_CONFIRMED, "Personal Model Confirmed",
            "Your personal trading model criteria must be met",
            RuleCategory.SUBJECTIVE, "boolean", True,
        ),
        RuleTypeDefinition(
            RuleType.SL_REQUIRED, "Stop Loss Required",
            "Every trade must have a stop loss defined",
            RuleCategory.RISK_EXECUTION, "boolean", True,
        ),
        RuleTypeDefinition(
            RuleType.TP_REQUIRED, "Take Profit Required",
            "Every trade must have a take profit defined",
            RuleCategory.RISK_EXECUTION, "boolean", True,
        ),
        RuleTypeDefinition(
            RuleType.MAX_RISK_PERCENT, "Maximum Risk Per Trade",
            "Maximum percentage of account to risk per trade",
            RuleCategory.RISK_EXECUTION, "number", 1, "lte",
        ),
        RuleTypeDefinition(
            RuleType.MIN_RISK_REWARD, "Minimum Risk/Reward Ratio",
            "Minimum risk-to-reward ratio required for trade entry",
            RuleCategory.RISK_EXECUTION, "number", 2, "gte",
        ),
        RuleTypeDefinition(
            RuleType.MAX_TRADES_PER_DAY, "Maximum Trades Per Day",
            "Limit the number of trades you can take in a single day",
            RuleCategory.RISK_EXECUTION, "number", 3, "lte",
        ),
        RuleTypeDefinition(
            RuleType.SESSION_ALLOWED, "Trading Sessions Allowed",
            "Restrict trading to specific market sessions",
            RuleCategory.CONTEXT, "multiselect", [],
        ),
        RuleTypeDefinition(
            RuleType.TIME_WINDOW_ALLOWED, "Trading Time Window",
            "Only trade during specific hours of the day",
            RuleCategory.CONTEXT, "time_range", "",
        ),
        RuleTypeDefinition(
            RuleType.DIRECTIONAL_BIAS_REQUIRED, "Directional Bias Required",
            "Require a clear directional bias before trading",
            RuleCategory.CONTEXT, "boolean", True,
        ),
    )
}


def get_rules_by_category(category: RuleCategory | str) -> list[RuleTypeDefinition]:
    category = RuleCategory(category)
    return [d for d in RULE_TYPE_CATALOG.values() if d.category == category]


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class StrategyRule(BaseModel):
    """One rule attached to a user's strategy."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    rule_id: int | str
    rule_type: str
    label: str = ""
    options: Any = None


class TradeInputs(BaseModel):
    """Facts captured at trade time that the trade row does not hold."""

    model_config = ConfigDict(
        populate_by_name=True, alias_generator=to_camel, extra="ignore"
    )

    entry_confirmation_present: bool | None = None
    setup_present: bool | None = None
    personal_model_confirmed: bool | None = None
    stop_loss_set: bool | None = None
    take_profit_set: bool | None = None
    risk_percent: float | None = None
    risk_reward: float | None = None
    trades_today: int | None = None
    current_session: str | None = None
    trade_time: str | None = None
    directional_bias_present: bool | None = None


class RuleEvaluation(BaseModel):
    rule_id: int | str
    rule_type: str
    rule_label: str
    expected_value: Any = None
    actual_value: Any = None
    passed: bool
    violation_reason: str | None = None


class ComplianceEvaluationResult(BaseModel):
    overall_compliant: bool
    rule_evaluations: list[RuleEvaluation] = Field(default_factory=list)
    violations: list[RuleEvaluation] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Primitive checks
# ---------------------------------------------------------------------------


def parse_rule_value(options: Any) -> Any:
    """Rule options are stored either raw or as ``{"value": ...}``."""
    if isinstance(options, dict) and "value" in options:
        return options["value"]
    return options


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def evaluate_number_rule(actual: float | None, expected: float | None, comparator: str) -> bool:
    if actual is None or expected is None:
        return False
    if comparator == "gte":
        return actual >= expected
    if comparator == "lte":
        return actual <= expected
    if comparator == "eq":
        return actual == expected
    return False


def evaluate_boolean_rule(actual: bool | None, expected: Any) -> bool:
    if actual is None:
        return False
    return actual == expected


def evaluate_multiselect_rule(actual: str | None, allowed: Iterable[str]) -> bool:
    allowed = [_SESSION_ALIASES.get(a, a) for a in allowed]
    if not actual or not allowed:
        return True
    return actual in allowed


def parse_time_to_minutes(value: str) -> int | None:
    match = _TIME_RE.match(value.strip())
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def evaluate_time_range_rule(trade_time: str | None, time_range: Any) -> bool:
    """Inclusive HH:MM window check; unparseable input passes."""
    if not trade_time or not time_range:
        return True
    if isinstance(time_range, dict):
        start, end = time_range.get("start", ""), time_range.get("end", "")
    elif isinstance(time_range, str) and "-" in time_range:
        start, _, end = time_range.partition("-")
    else:
        return True

    minutes = parse_time_to_minutes(trade_time)
    start_m = parse_time_to_minutes(start)
    end_m = parse_time_to_minutes(end)
    if minutes is None or start_m is None or end_m is None:
        return True
    return start_m <= minutes <= end_m


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def _evaluate(
    rule_type: RuleType,
    expected: Any,
    trade: TradeRecord,
    intent: TradeIntent | None,
    inputs: TradeInputs,
) -> tuple[Any, bool, str]:
    """Return (actual value, passed, violation reason) for one rule."""
    if rule_type == RuleType.ENTRY_CONFIRMATION_REQUIRED:
        actual = inputs.entry_confirmation_present
        if actual is None and intent is not None:
            actual = intent.entry_confirmed
        return actual, evaluate_boolean_rule(actual, expected), "Entry confirmation not present"

    if rule_type == RuleType.SETUP_PRESENT:
        actual = inputs.setup_present
        return actual, evaluate_boolean_rule(actual, expected), "Setup not identified"

    if rule_type == RuleType.PERSONAL_MODEL_CONFIRMED:
        actual = inputs.personal_model_confirmed
        return actual, evaluate_boolean_rule(actual, expected), "Personal model criteria not met"

    if rule_type == RuleType.SL_REQUIRED:
        actual = inputs.stop_loss_set
        if actual is None:
            actual = trade.stop_loss is not None
        return actual, evaluate_boolean_rule(actual, expected), "Stop loss not set"

    if rule_type == RuleType.TP_REQUIRED:
        actual = inputs.take_profit_set
        if actual is None:
            actual = trade.take_profit is not None
        return actual, evaluate_boolean_rule(actual, expected), "Take profit not set"

    if rule_type == RuleType.MAX_RISK_PERCENT:
        actual = inputs.risk_percent if inputs.risk_percent is not None else trade.risk_percent
        limit = _to_number(expected)
        passed = evaluate_number_rule(actual, limit, RULE_TYPE_CATALOG[rule_type].comparator)
        return actual, passed, f"Risk {actual}% exceeds maximum {expected}%"

    if rule_type == RuleType.MIN_RISK_REWARD:
        actual = inputs.risk_reward
        if actual is None:
            actual = trade.risk_reward or 0.0
        minimum = _to_number(expected)
        passed = evaluate_number_rule(actual, minimum, RULE_TYPE_CATALOG[rule_type].comparator)
        return actual, passed, f"R:R {actual} below minimum {expected}"

    if rule_type == RuleType.MAX_TRADES_PER_DAY:
        actual = inputs.trades_today if inputs.trades_today is not None else 1
        limit = _to_number(expected)
        passed = evaluate_number_rule(actual, limit, RULE_TYPE_CATALOG[rule_type].comparator)
        return actual, passed, f"{actual} trades today exceeds limit of {expected}"

    if rule_type == RuleType.SESSION_ALLOWED:
        actual = inputs.current_session or classify_session(trade.timestamp).value
        allowed = expected if isinstance(expected, list) else []
        passed = evaluate_multiselect_rule(actual, allowed)
        return actual, passed, f'Session "{actual}" not in allowed sessions'

    if rule_type == RuleType.TIME_WINDOW_ALLOWED:
        actual = inputs.trade_time
        return actual, evaluate_time_range_rule(actual, expected), "Trade time outside allowed window"

    if rule_type == RuleType.DIRECTIONAL_BIAS_REQUIRED:
        actual = inputs.directional_bias_present
        if actual is None and intent is not None:
            actual = intent.htf_bias_clear
        return actual, evaluate_boolean_rule(actual, expected), "Directional bias not established"

    return None, True, ""


def evaluate_trade_compliance(
    trade: TradeRecord | Any,
    rules: Iterable[StrategyRule | dict[str, Any]],
    inputs: TradeInputs | dict[str, Any] | None = None,
    intent: TradeIntent | Any | None = None,
) -> ComplianceEvaluationResult:
    """Evaluate every rule in *rules* against one trade.

    Args:
        trade: The logged trade (record or mapping).
        rules: Strategy rules; unknown rule types are skipped.
        inputs: Trade-time facts; missing values fall back to the trade.
        intent: Optional pre-trade checklist for entry / bias fallbacks.

    Raises:
        InvalidInput: If the trade or intent cannot be interpreted.
    """
    record = TradeRecord.coerce(trade)
    checklist = TradeIntent.coerce(intent) if intent is not None else None
    if inputs is None:
        inputs = TradeInputs()
    elif not isinstance(inputs, TradeInputs):
        inputs = coerce_model(TradeInputs, inputs)

    evaluations: list[RuleEvaluation] = []
    for raw in rules:
        rule = coerce_model(StrategyRule, raw)
        try:
            rule_type = RuleType(rule.rule_type)
        except ValueError:
            logger.debug("Skipping unknown rule type %s", rule.rule_type)
            continue

        expected = parse_rule_value(rule.options)
        if expected is None:
            expected = RULE_TYPE_CATALOG[rule_type].default_value

        actual, passed, reason = _evaluate(rule_type, expected, record, checklist, inputs)
        evaluations.append(
            RuleEvaluation(
                rule_id=rule.rule_id,
                rule_type=rule_type.value,
                rule_label=rule.label or RULE_TYPE_CATALOG[rule_type].label,
                expected_value=expected,
                actual_value=actual,
                passed=passed,
                violation_reason=None if passed else reason,
            )
        )

    violations = [e for e in evaluations if not e.passed]
    if violations:
        logger.debug(
            "Trade %s violates %d of %d rules",
            record.trade_id, len(violations), len(evaluations),
        )
    return ComplianceEvaluationResult(
        overall_compliant=not violations,
        rule_evaluations=evaluations,
        violations=violations,
    )
