"""Per-session performance analysis over the five-band session scheme.

Answers questions like "Am I better in the London session?" by bucketing
trades on their UTC entry hour and computing per-session counts, win
rate, P&L, average risk and traded volume.

Usage::

    analyser = SessionAnalyser()
    for trade in trades:
        analyser.add_trade(trade)
    result = analyser.report()
    print(result.best_session)

or in one call::

    result = analyse_sessions(trades)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from trade_intelligence.core.enums import MarketSession, TradeOutcome

from .record import TradeRecord
from .sessions import SESSIONS, classify_session, session_info

logger = logging.getLogger(__name__)


@dataclass
class _BucketStats:
    """Accumulator for one session."""

    trades: int = 0
    wins: int = 0
    losses: int = 0
    breakevens: int = 0
    total_pnl: float = 0.0
    total_risk: float = 0.0
    risk_count: int = 0
    total_volume: float = 0.0

    def record(self, trade: TradeRecord) -> None:
        self.trades += 1
        self.total_pnl += trade.net_pl
        if trade.outcome == TradeOutcome.WIN:
            self.wins += 1
        elif trade.outcome == TradeOutcome.LOSS:
            self.losses += 1
        elif trade.outcome == TradeOutcome.BREAKEVEN:
            self.breakevens += 1
        if trade.risk_percent is not None:
            self.total_risk += trade.risk_percent
            self.risk_count += 1
        if trade.lot_size is not None:
            self.total_volume += trade.lot_size


@dataclass(frozen=True)
class SessionMetrics:
    session: MarketSession
    display_name: str
    color: str
    trade_count: int
    win_count: int
    loss_count: int
    break_even_count: int
    win_rate: float
    total_pnl: float
    avg_pnl: float
    avg_risk: float
    total_volume: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "session": self.session.value,
            "displayName": self.display_name,
            "color": self.color,
            "tradeCount": self.trade_count,
            "winCount": self.win_count,
            "lossCount": self.loss_count,
            "breakEvenCount": self.break_even_count,
            "winRate": round(self.win_rate, 2),
            "totalPnL": round(self.total_pnl, 2),
            "avgPnL": round(self.avg_pnl, 2),
            "avgRisk": round(self.avg_risk, 2),
            "totalVolume": round(self.total_volume, 2),
        }


@dataclass(frozen=True)
class SessionAnalyticsResult:
    sessions: list[SessionMetrics] = field(default_factory=list)
    total_trades: int = 0
    best_session: MarketSession | None = None
    worst_session: MarketSession | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions": [s.to_dict() for s in self.sessions],
            "totalTrades": self.total_trades,
            "bestSession": self.best_session.value if self.best_session else None,
            "worstSession": self.worst_session.value if self.worst_session else None,
        }


def _to_metrics(session: MarketSession, stats: _BucketStats) -> SessionMetrics:
    info = session_info(session)
    decided = stats.wins + stats.losses + stats.breakevens
    return SessionMetrics(
        session=session,
        display_name=info.display_name,
        color=info.color,
        trade_count=stats.trades,
        win_count=stats.wins,
        loss_count=stats.losses,
        break_even_count=stats.breakevens,
        win_rate=stats.wins / decided * 100 if decided else 0.0,
        total_pnl=stats.total_pnl,
        avg_pnl=stats.total_pnl / stats.trades if stats.trades else 0.0,
        avg_risk=stats.total_risk / stats.risk_count if stats.risk_count else 0.0,
        total_volume=stats.total_volume,
    )


class SessionAnalyser:
    """Five-band session performance analyser.

    Holds its own buckets; create one per report.
    """

    def __init__(self) -> None:
        self._buckets: dict[MarketSession, _BucketStats] = {
            session: _BucketStats() for session in SESSIONS
        }
        self._total = 0

    def add_trade(self, trade: TradeRecord | Any) -> None:
        """Add a trade (record or mapping) to its session bucket."""
        record = TradeRecord.coerce(trade)
        self._buckets[classify_session(record.timestamp)].record(record)
        self._total += 1

    def report(self) -> SessionAnalyticsResult:
        """Build the per-session report.

        Only sessions with at least one trade are listed, in session
        declaration order.  Best / worst are by total P&L; ties go to the
        earlier session.
        """
        metrics = [
            _to_metrics(session, stats)
            for session, stats in self._buckets.items()
            if stats.trades > 0
        ]
        if not metrics:
            return SessionAnalyticsResult()

        best = metrics[0]
        worst = metrics[0]
        for m in metrics[1:]:
            if m.total_pnl > best.total_pnl:
                best = m
            if m.total_pnl < worst.total_pnl:
                worst = m

        logger.debug(
            "Session report: %d trades across %d sessions", self._total, len(metrics)
        )
        return SessionAnalyticsResult(
            sessions=metrics,
            total_trades=self._total,
            best_session=best.session,
            worst_session=worst.session,
        )


def analyse_sessions(trades: Iterable[TradeRecord | Any]) -> SessionAnalyticsResult:
    """Build a session report for *trades* in one call.

    Every trade is coerced before any is bucketed, so a malformed trade
    raises ``InvalidInput`` without a partial report.
    """
    records = [TradeRecord.coerce(t) for t in trades]
    analyser = SessionAnalyser()
    for record in records:
        analyser.add_trade(record)
    return analyser.report()
