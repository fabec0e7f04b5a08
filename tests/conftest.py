"""Shared fixtures for the trade-intelligence test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from trade_intelligence.core.enums import TradeOutcome
from trade_intelligence.journal.record import TradeIntent, TradeRecord

# 2024-01-01 was a Monday
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_trade(
    hour: int = 10,
    net_pl: float = 100.0,
    outcome: TradeOutcome | str = TradeOutcome.WIN,
    *,
    day: int = 0,
    minute: int = 0,
    risk_reward: float | None = None,
    setup: str | None = "Breaker",
    trade_id: str | None = None,
    **extra: Any,
) -> TradeRecord:
    """Trade opened at ``BASE_TIME + day`` days at ``hour:minute`` UTC."""
    return TradeRecord(
        trade_id=trade_id,
        timestamp=BASE_TIME + timedelta(days=day, hours=hour, minutes=minute),
        net_pl=net_pl,
        outcome=outcome,
        risk_reward=risk_reward,
        setup=setup,
        **extra,
    )


@pytest.fixture
def make_trade():
    return build_trade


@pytest.fixture
def passing_intent() -> TradeIntent:
    """Checklist with every precondition satisfied."""
    return TradeIntent(
        htf_bias_clear=True,
        zone_valid=True,
        liquidity_taken=True,
        structure_confirmed=True,
        entry_confirmed=True,
        zone_validity="Valid",
    )
