"""Trade validation and performance intelligence engine.

Public API
----------
validate_trade_intent   Ordered pre-trade checklist, first failure reported
aggregate_performance   Session / day / setup breakdowns and risk ratios
classify_session        Five-band UTC market session label
classify_pnl_session    Three-band session used for P&L attribution
analyse_sessions        Per-session metrics over the five-band scheme
evaluate_trade_compliance  Strategy rule compliance for a logged trade
"""

from trade_intelligence.core.errors import InvalidInput, TradingIntelError
from trade_intelligence.journal.performance import PerformanceSummary, aggregate_performance
from trade_intelligence.journal.record import TradeIntent, TradeRecord
from trade_intelligence.journal.session_analysis import analyse_sessions
from trade_intelligence.journal.sessions import (
    classify_pnl_session,
    classify_session,
    session_info,
)
from trade_intelligence.validation.compliance import evaluate_trade_compliance
from trade_intelligence.validation.trade_rules import ValidationResult, validate_trade_intent

__version__ = "0.1.0"

__all__ = [
    "InvalidInput",
    "PerformanceSummary",
    "TradeIntent",
    "TradeRecord",
    "TradingIntelError",
    "ValidationResult",
    "aggregate_performance",
    "analyse_sessions",
    "classify_pnl_session",
    "classify_session",
    "evaluate_trade_compliance",
    "session_info",
    "validate_trade_intent",
]
