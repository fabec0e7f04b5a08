"""Trade validation.

Checklist:
    TRADE_RULES, TradeRule, ValidationResult, validate_trade_intent

Compliance:
    StrategyRule, TradeInputs, RuleEvaluation, ComplianceEvaluationResult,
    RULE_TYPE_CATALOG, get_rules_by_category, evaluate_trade_compliance
"""

from trade_intelligence.validation.compliance import (
    RULE_TYPE_CATALOG,
    ComplianceEvaluationResult,
    RuleEvaluation,
    StrategyRule,
    TradeInputs,
    evaluate_trade_compliance,
    get_rules_by_category,
)
from trade_intelligence.validation.trade_rules import (
    TRADE_RULES,
    TradeRule,
    ValidationResult,
    validate_trade_intent,
)

__all__ = [
    "TRADE_RULES",
    "TradeRule",
    "ValidationResult",
    "validate_trade_intent",
    "RULE_TYPE_CATALOG",
    "ComplianceEvaluationResult",
    "RuleEvaluation",
    "StrategyRule",
    "TradeInputs",
    "evaluate_trade_compliance",
    "get_rules_by_category",
]
