"""Performance intelligence: session, day and setup breakdowns plus
equity-curve risk ratios for one user's trade history.

The aggregator sorts the trades chronologically and makes a single
forward pass, updating locally scoped accumulators:

* P&L per three-band session (London / NY / Asia) and per UTC weekday
* win / loss counts (pending and break-even trades count in neither)
* reward-to-risk sum over trades that have one (``risk_reward > 0``)
* a running equity curve: peak and maximum peak-to-trough drawdown
* violation counters (outside session, no strategy, over risk)
* win / total tallies per setup

Ratios are kept as floats on :class:`PerformanceSummary` and rendered as
fixed-decimal strings by :meth:`PerformanceSummary.to_dict`.

Usage::

    summary = aggregate_performance(trades)
    payload = summary.to_dict()
    print(payload["bestSession"], payload["maxDrawdown"])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from trade_intelligence.core.config import PerformanceConfig, Settings
from trade_intelligence.core.enums import PnlSession, ProfitFactorMode, TradeOutcome
from trade_intelligence.core.errors import InvalidInput

from .record import TradeRecord
from .sessions import is_outside_session, pnl_session_for_hour

logger = logging.getLogger(__name__)

# Indexed by datetime.weekday() (0=Monday); also the tie-break order
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

PNL_SESSION_ORDER = [PnlSession.LONDON, PnlSession.NY, PnlSession.ASIA]

NO_SETUP = "N/A"

# Reported when the denominator is zero but the numerator is positive
PROFIT_FACTOR_CAP = 100.0
RECOVERY_FACTOR_CAP = 100.0


def _fmt(value: float, digits: int = 2) -> str:
    text = f"{value:.{digits}f}"
    if text.startswith("-") and float(text) == 0:
        return text[1:]
    return text


def _best_key(buckets: dict[str, float]) -> str:
    """Key with the largest value; ties go to the earliest key."""
    best_key, best_val = None, 0.0
    for key, val in buckets.items():
        if best_key is None or val > best_val:
            best_key, best_val = key, val
    return best_key if best_key is not None else NO_SETUP


# ---------------------------------------------------------------------------
# Accumulators
# ---------------------------------------------------------------------------


@dataclass
class EquityCurve:
    """Running equity, peak and maximum drawdown, starting from zero."""

    current_equity: float = 0.0
    peak: float = 0.0
    max_drawdown: float = 0.0

    def update(self, pnl: float) -> None:
        self.current_equity += pnl
        if self.current_equity > self.peak:
            self.peak = self.current_equity
        drawdown = self.peak - self.current_equity
        if drawdown > self.max_drawdown:
            self.max_drawdown = drawdown

    @property
    def max_drawdown_pct(self) -> float:
        if self.peak > 0:
            return self.max_drawdown / self.peak * 100
        return 0.0


@dataclass
class SetupStats:
    wins: int = 0
    total: int = 0

    @property
    def win_rate(self) -> float:
        return self.wins / self.total * 100 if self.total else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"wins": self.wins, "total": self.total, "winRate": _fmt(self.win_rate)}


@dataclass
class Violations:
    """Procedural violations counted over the history.

    ``over_risk`` only counts when a maximum risk percent is configured;
    otherwise it stays zero but is always reported.
    """

    over_risk: int = 0
    outside_session: int = 0
    no_strategy: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "overRisk": self.over_risk,
            "outsideSession": self.outside_session,
            "noStrategy": self.no_strategy,
        }


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PerformanceSummary:
    """Aggregated performance for one trade history."""

    best_session: str
    best_day: str
    best_setup: str
    total_trades: int
    wins: int
    losses: int
    total_pl: float
    win_rate: float
    avg_rr: float
    expectancy: float
    profit_factor: float
    profit_factor_mode: ProfitFactorMode
    max_drawdown: float
    max_drawdown_percent: float
    recovery_factor: float
    peak_equity: float
    final_equity: float
    violations: Violations = field(default_factory=Violations)
    session_pl: dict[str, float] = field(default_factory=dict)
    day_pl: dict[str, float] = field(default_factory=dict)
    setup_stats: dict[str, SetupStats] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload with fixed-decimal string ratios."""
        return {
            "bestSession": self.best_session,
            "bestDay": self.best_day,
            "bestSetup": self.best_setup,
            "winRate": _fmt(self.win_rate, 1),
            "avgRR": _fmt(self.avg_rr),
            "expectancy": _fmt(self.expectancy),
            "profitFactor": _fmt(self.profit_factor),
            "maxDrawdown": _fmt(self.max_drawdown),
            "maxDrawdownPercent": _fmt(self.max_drawdown_percent),
            "recoveryFactor": _fmt(self.recovery_factor),
            "violations": self.violations.to_dict(),
            "totalTrades": self.total_trades,
            "wins": self.wins,
            "losses": self.losses,
            "totalPl": _fmt(self.total_pl),
            "peakEquity": _fmt(self.peak_equity),
            "profitFactorMode": self.profit_factor_mode.value,
            "sessionPl": {k: _fmt(v) for k, v in self.session_pl.items()},
            "dayPl": {k: _fmt(v) for k, v in self.day_pl.items()},
            "setupStats": {k: v.to_dict() for k, v in self.setup_stats.items()},
        }


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------


def legacy_profit_factor(total_pl: float, final_equity: float) -> float:
    """|total P&L| / |total P&L - final equity| (denominator floored to 1).

    Equity starts at zero, so the denominator is always zero and this
    reduces to ``abs(total_pl)``.  Kept for payload compatibility.
    """
    return abs(total_pl) / (abs(total_pl - final_equity) or 1)


def standard_profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit / |gross loss|, capped when there are no losses."""
    gross_loss = abs(gross_loss)
    if gross_loss > 0:
        return gross_profit / gross_loss
    return PROFIT_FACTOR_CAP if gross_profit > 0 else 0.0


def recovery_factor(total_pl: float, max_drawdown: float) -> float:
    if max_drawdown > 0:
        return total_pl / max_drawdown
    return RECOVERY_FACTOR_CAP if total_pl > 0 else 0.0


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _id_key(trade_id: str | None) -> tuple[int, int | str]:
    # Serial ids compare numerically so 9 runs before 10
    if trade_id is not None and trade_id.isascii() and trade_id.isdigit():
        return (0, int(trade_id))
    return (1, trade_id or "")


def _sorted_records(trades: Iterable[TradeRecord | Any]) -> list[TradeRecord]:
    records = [TradeRecord.coerce(t) for t in trades]
    order = sorted(
        range(len(records)),
        key=lambda i: (records[i].timestamp, _id_key(records[i].trade_id), i),
    )
    return [records[i] for i in order]


def aggregate_performance(
    trades: Iterable[TradeRecord | Any],
    *,
    profit_factor_mode: ProfitFactorMode | str | None = None,
    max_risk_percent: float | None = None,
    settings: Settings | None = None,
) -> PerformanceSummary:
    """Aggregate a user's trade history into a performance summary.

    Args:
        trades: Trade records or mappings, in any order.
        profit_factor_mode: ``legacy`` or ``standard``; defaults to the
            configured mode.
        max_risk_percent: Risk percent above which a trade counts as
            ``overRisk``; defaults to the configured limit (none).
        settings: Engine settings supplying the defaults above.

    Raises:
        InvalidInput: If any trade has an unparseable timestamp or a
            non-numeric P&L, or the profit factor mode is unknown.
            Nothing is aggregated in that case.
    """
    cfg = settings.performance if settings is not None else PerformanceConfig()
    try:
        mode = ProfitFactorMode(profit_factor_mode or cfg.profit_factor_mode)
    except ValueError as exc:
        raise InvalidInput(
            f"unknown mode {profit_factor_mode!r}", field="profit_factor_mode"
        ) from exc
    risk_limit = max_risk_percent if max_risk_percent is not None else cfg.max_risk_percent

    records = _sorted_records(trades)

    sessions: dict[str, float] = {s.value: 0.0 for s in PNL_SESSION_ORDER}
    days: dict[str, float] = {d: 0.0 for d in DAY_NAMES}
    setups: dict[str, SetupStats] = {}
    violations = Violations()
    equity = EquityCurve()

    total_pl = 0.0
    gross_profit = 0.0
    gross_loss = 0.0
    wins = 0
    losses = 0
    total_rr = 0.0
    rr_count = 0

    for t in records:
        hour = t.timestamp.hour
        pl = t.net_pl

        total_pl += pl
        equity.update(pl)
        if pl > 0:
            gross_profit += pl
        elif pl < 0:
            gross_loss += pl

        sessions[pnl_session_for_hour(hour).value] += pl
        days[DAY_NAMES[t.timestamp.weekday()]] += pl

        if t.outcome == TradeOutcome.WIN:
            wins += 1
        elif t.outcome == TradeOutcome.LOSS:
            losses += 1

        if t.risk_reward is not None and t.risk_reward > 0:
            total_rr += t.risk_reward
            rr_count += 1

        if is_outside_session(hour):
            violations.outside_session += 1
        if not t.has_strategy:
            violations.no_strategy += 1
        if (
            risk_limit is not None
            and t.risk_percent is not None
            and t.risk_percent > risk_limit
        ):
            violations.over_risk += 1

        stats = setups.setdefault(t.setup_key, SetupStats())
        stats.total += 1
        if t.outcome == TradeOutcome.WIN:
            stats.wins += 1

    n = len(records)
    if mode == ProfitFactorMode.STANDARD:
        profit_factor = standard_profit_factor(gross_profit, gross_loss)
    else:
        profit_factor = legacy_profit_factor(total_pl, equity.current_equity)

    summary = PerformanceSummary(
        best_session=_best_key(sessions),
        best_day=_best_key(days),
        best_setup=_best_key({k: v.win_rate for k, v in setups.items()}),
        total_trades=n,
        wins=wins,
        losses=losses,
        total_pl=total_pl,
        win_rate=wins / n * 100 if n else 0.0,
        avg_rr=total_rr / rr_count if rr_count else 0.0,
        expectancy=total_pl / n if n else 0.0,
        profit_factor=profit_factor,
        profit_factor_mode=mode,
        max_drawdown=equity.max_drawdown,
        max_drawdown_percent=equity.max_drawdown_pct,
        recovery_factor=recovery_factor(total_pl, equity.max_drawdown),
        peak_equity=equity.peak,
        final_equity=equity.current_equity,
        violations=violations,
        session_pl=sessions,
        day_pl=days,
        setup_stats=setups,
    )
    logger.debug(
        "Aggregated %d trades: total_pl=%.2f max_dd=%.2f pf_mode=%s",
        n, total_pl, equity.max_drawdown, mode.value,
    )
    return summary
