"""Trade journal analytics.

TradeRecord        One journal trade (timestamp, P&L, outcome, R:R, setup)
TradeIntent        Pre-trade execution checklist
classify_session   Five-band display session for a timestamp
classify_pnl_session  Three-band P&L attribution session
SessionAnalyser    Per-session metrics over the five-band scheme
aggregate_performance  Session / day / setup breakdowns, equity-curve ratios
"""

from .record import TradeIntent, TradeRecord
from .sessions import (
    SESSION_INFO,
    SessionInfo,
    classify_pnl_session,
    classify_session,
    session_info,
)
from .session_analysis import SessionAnalyser, SessionAnalyticsResult, analyse_sessions
from .performance import EquityCurve, PerformanceSummary, aggregate_performance

__all__ = [
    "TradeRecord",
    "TradeIntent",
    "SESSION_INFO",
    "SessionInfo",
    "classify_session",
    "classify_pnl_session",
    "session_info",
    "SessionAnalyser",
    "SessionAnalyticsResult",
    "analyse_sessions",
    "EquityCurve",
    "PerformanceSummary",
    "aggregate_performance",
]
