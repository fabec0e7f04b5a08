"""Tests for the five-band and three-band session classifiers."""

from datetime import datetime, timezone

import pytest

from trade_intelligence.core.enums import MarketSession, PnlSession
from trade_intelligence.core.errors import InvalidInput
from trade_intelligence.journal.sessions import (
    SESSION_INFO,
    classify_pnl_session,
    classify_session,
    get_session_color,
    get_session_display_name,
    is_outside_session,
    session_info,
)


def _at(hour: int) -> datetime:
    return datetime(2024, 1, 1, hour, 30, tzinfo=timezone.utc)


FIVE_BAND = (
    [MarketSession.ASIAN] * 7
    + [MarketSession.LONDON] * 5
    + [MarketSession.OVERLAP_LONDON_NY] * 4
    + [MarketSession.NEW_YORK] * 5
    + [MarketSession.OFF_HOURS] * 3
)

THREE_BAND = (
    [PnlSession.ASIA] * 8
    + [PnlSession.LONDON] * 8
    + [PnlSession.NY] * 5
    + [PnlSession.ASIA] * 3
)


class TestFiveBandScheme:
    @pytest.mark.parametrize("hour", range(24))
    def test_every_hour_has_one_label(self, hour):
        assert classify_session(_at(hour)) == FIVE_BAND[hour]

    def test_boundaries(self):
        assert classify_session(_at(6)) == MarketSession.ASIAN
        assert classify_session(_at(7)) == MarketSession.LONDON
        assert classify_session(_at(12)) == MarketSession.OVERLAP_LONDON_NY
        assert classify_session(_at(16)) == MarketSession.NEW_YORK
        assert classify_session(_at(21)) == MarketSession.OFF_HOURS

    def test_accepts_iso_string(self):
        assert classify_session("2024-01-01T13:00:00Z") == MarketSession.OVERLAP_LONDON_NY

    def test_uses_utc_hour(self):
        # 09:00 in New York is 14:00 UTC
        assert classify_session("2024-01-01T09:00:00-05:00") == MarketSession.OVERLAP_LONDON_NY

    def test_unparseable_timestamp(self):
        with pytest.raises(InvalidInput):
            classify_session("half past nine")


class TestThreeBandScheme:
    @pytest.mark.parametrize("hour", range(24))
    def test_every_hour(self, hour):
        assert classify_pnl_session(_at(hour)) == THREE_BAND[hour]

    @pytest.mark.parametrize("hour", [13, 14, 15])
    def test_overlap_goes_to_london(self, hour):
        """London is checked first, so the 13-16 overlap is London's."""
        assert classify_pnl_session(_at(hour)) == PnlSession.LONDON

    def test_schemes_disagree_at_same_hour(self):
        ts = _at(7)
        assert classify_session(ts) == MarketSession.LONDON
        assert classify_pnl_session(ts) == PnlSession.ASIA

    def test_unparseable_timestamp(self):
        with pytest.raises(InvalidInput):
            classify_pnl_session("")


class TestOutsideSession:
    @pytest.mark.parametrize("hour,outside", [
        (0, True), (7, True), (8, False), (15, False), (20, False), (21, True), (23, True),
    ])
    def test_active_window(self, hour, outside):
        assert is_outside_session(hour) is outside


class TestSessionInfo:
    def test_every_session_has_info(self):
        assert set(SESSION_INFO) == set(MarketSession)

    def test_lookup_by_value(self):
        info = session_info("overlap_london_ny")
        assert info.display_name == "London/NY Overlap"
        assert info.color == "#8b5cf6"

    def test_to_dict(self):
        assert session_info(MarketSession.NEW_YORK).to_dict() == {
            "session": "new_york",
            "displayName": "New York",
            "color": "#10b981",
        }

    def test_unknown_session_fallbacks(self):
        assert get_session_display_name("lunar") == "lunar"
        assert get_session_color("lunar") == "#6b7280"
        assert get_session_display_name(MarketSession.ASIAN) == "Asian"
