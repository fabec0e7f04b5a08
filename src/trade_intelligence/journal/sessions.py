"""Market session classification from the UTC hour of a timestamp.

Two schemes exist and are kept separate because they bucket the same
hour differently:

``classify_session``
    Five-band display scheme.  A true partition of the UTC day::

        asian              00:00-07:00
        london             07:00-12:00
        overlap_london_ny  12:00-16:00
        new_york           16:00-21:00
        off_hours          21:00-24:00

``classify_pnl_session``
    Three-band scheme used for P&L attribution by the performance
    aggregator.  London (08-16) and New York (13-21) overlap; bands are
    checked in declaration order and the first match wins, so 13:00-16:00
    is attributed to London.  Everything else falls to Asia.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trade_intelligence.core.enums import MarketSession, PnlSession

from .record import parse_timestamp

# Session definitions (UTC hours, inclusive start, exclusive end)
SESSIONS: dict[MarketSession, tuple[int, int]] = {
    MarketSession.ASIAN: (0, 7),
    MarketSession.LONDON: (7, 12),
    MarketSession.OVERLAP_LONDON_NY: (12, 16),
    MarketSession.NEW_YORK: (16, 21),
    MarketSession.OFF_HOURS: (21, 24),
}

# First match wins; anything unmatched is Asia
PNL_SESSIONS: dict[PnlSession, tuple[int, int]] = {
    PnlSession.LONDON: (8, 16),
    PnlSession.NY: (13, 21),
}

# Hours outside this window count as trading outside a session
ACTIVE_HOURS = (8, 21)


@dataclass(frozen=True)
class SessionInfo:
    """Display metadata for a session label."""

    session: MarketSession
    display_name: str
    color: str

    def to_dict(self) -> dict[str, str]:
        return {
            "session": self.session.value,
            "displayName": self.display_name,
            "color": self.color,
        }


SESSION_INFO: dict[MarketSession, SessionInfo] = {
    MarketSession.ASIAN: SessionInfo(MarketSession.ASIAN, "Asian", "#f59e0b"),
    MarketSession.LONDON: SessionInfo(MarketSession.LONDON, "London", "#3b82f6"),
    MarketSession.NEW_YORK: SessionInfo(MarketSession.NEW_YORK, "New York", "#10b981"),
    MarketSession.OVERLAP_LONDON_NY: SessionInfo(
        MarketSession.OVERLAP_LONDON_NY, "London/NY Overlap", "#8b5cf6"
    ),
    MarketSession.OFF_HOURS: SessionInfo(MarketSession.OFF_HOURS, "Off Hours", "#6b7280"),
}

DEFAULT_COLOR = "#6b7280"


def session_for_hour(hour: int) -> MarketSession:
    """Five-band session for a UTC hour (0-23)."""
    for session, (start_h, end_h) in SESSIONS.items():
        if start_h <= hour < end_h:
            return session
    raise ValueError(f"hour out of range: {hour}")


def pnl_session_for_hour(hour: int) -> PnlSession:
    """Three-band P&L attribution session for a UTC hour (0-23)."""
    for session, (start_h, end_h) in PNL_SESSIONS.items():
        if start_h <= hour < end_h:
            return session
    return PnlSession.ASIA


def is_outside_session(hour: int) -> bool:
    start_h, end_h = ACTIVE_HOURS
    return hour < start_h or hour >= end_h


def classify_session(timestamp: datetime | str) -> MarketSession:
    """Map a timestamp to its five-band market session.

    Raises
    ------
    InvalidInput
        If *timestamp* cannot be parsed.
    """
    return session_for_hour(parse_timestamp(timestamp).hour)


def classify_pnl_session(timestamp: datetime | str) -> PnlSession:
    """Map a timestamp to its three-band P&L attribution session.

    Raises
    ------
    InvalidInput
        If *timestamp* cannot be parsed.
    """
    return pnl_session_for_hour(parse_timestamp(timestamp).hour)


def session_info(session: MarketSession | str) -> SessionInfo:
    """Display metadata for *session* (accepts the enum or its value)."""
    return SESSION_INFO[MarketSession(session)]


def get_session_display_name(session: MarketSession | str) -> str:
    try:
        return session_info(session).display_name
    except ValueError:
        return str(session)


def get_session_color(session: MarketSession | str) -> str:
    try:
        return session_info(session).color
    except ValueError:
        return DEFAULT_COLOR
