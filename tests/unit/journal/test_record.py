"""Tests for TradeRecord / TradeIntent coercion."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from trade_intelligence.core.enums import TradeOutcome, ZoneValidity
from trade_intelligence.core.errors import InvalidInput
from trade_intelligence.journal.record import (
    TradeIntent,
    TradeRecord,
    parse_timestamp,
)


class TestTradeRecordCoercion:
    def test_camel_case_mapping(self):
        trade = TradeRecord.coerce({
            "id": 7,
            "createdAt": "2024-01-01T09:30:00Z",
            "netPl": "100.5",
            "outcome": "Win",
            "riskReward": "2.5",
            "setup": "Order Block",
        })
        assert trade.trade_id == "7"
        assert trade.timestamp == datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)
        assert trade.net_pl == 100.5
        assert trade.outcome == TradeOutcome.WIN
        assert trade.risk_reward == 2.5
        assert trade.setup == "Order Block"

    def test_snake_case_mapping(self):
        trade = TradeRecord.coerce({
            "timestamp": "2024-01-01T09:30:00Z",
            "net_pl": -20,
            "outcome": "Loss",
        })
        assert trade.net_pl == -20.0
        assert trade.outcome == TradeOutcome.LOSS

    def test_naive_timestamp_is_utc(self):
        trade = TradeRecord.coerce({"timestamp": datetime(2024, 1, 1, 9), "netPl": 1})
        assert trade.timestamp.tzinfo == timezone.utc
        assert trade.timestamp.hour == 9

    def test_offset_timestamp_converted_to_utc(self):
        trade = TradeRecord.coerce({"timestamp": "2024-01-01T10:00:00+02:00", "netPl": 1})
        assert trade.timestamp.hour == 8

    @pytest.mark.parametrize("raw,expected", [
        ("win", TradeOutcome.WIN),
        ("LOSS", TradeOutcome.LOSS),
        ("BE", TradeOutcome.BREAKEVEN),
        ("BreakEven", TradeOutcome.BREAKEVEN),
        ("Pending", TradeOutcome.PENDING),
        (None, TradeOutcome.PENDING),
    ])
    def test_outcome_parsing(self, raw, expected):
        trade = TradeRecord.coerce({"timestamp": "2024-01-01T09:00:00Z", "netPl": 0, "outcome": raw})
        assert trade.outcome == expected

    def test_blank_numeric_columns_are_none(self):
        trade = TradeRecord.coerce({
            "timestamp": "2024-01-01T09:00:00Z",
            "netPl": 0,
            "riskReward": "",
            "stopLoss": "",
        })
        assert trade.risk_reward is None
        assert trade.stop_loss is None

    def test_missing_setup_has_no_strategy(self):
        trade = TradeRecord.coerce({"timestamp": "2024-01-01T09:00:00Z", "netPl": 0})
        assert not trade.has_strategy
        assert trade.setup_key == "Unknown"

    def test_unknown_setup_has_no_strategy(self):
        trade = TradeRecord.coerce({"timestamp": "2024-01-01T09:00:00Z", "netPl": 0, "setup": "Unknown"})
        assert not trade.has_strategy

    def test_coerce_from_attributes(self):
        class Row:
            created_at = datetime(2024, 1, 1, 12)
            net_pl = 5.0
            outcome = "Win"

        trade = TradeRecord.coerce(Row())
        assert trade.net_pl == 5.0
        assert trade.outcome == TradeOutcome.WIN

    def test_existing_record_returned_as_is(self, make_trade):
        trade = make_trade()
        assert TradeRecord.coerce(trade) is trade


class TestTradeRecordInvalidInput:
    def test_unparseable_timestamp(self):
        with pytest.raises(InvalidInput, match="timestamp"):
            TradeRecord.coerce({"timestamp": "not-a-date", "netPl": 1})

    def test_missing_timestamp(self):
        with pytest.raises(InvalidInput):
            TradeRecord.coerce({"netPl": 1})

    def test_non_numeric_pl(self):
        with pytest.raises(InvalidInput, match="net_?[pP]l"):
            TradeRecord.coerce({"timestamp": "2024-01-01T09:00:00Z", "netPl": "lots"})

    @pytest.mark.parametrize("field", ["netPl", "riskReward", "riskPercent", "lotSize"])
    def test_boolean_numeric_rejected(self, field):
        row = {"timestamp": "2024-01-01T09:00:00Z", "netPl": 10, field: True}
        with pytest.raises(InvalidInput, match="boolean"):
            TradeRecord.coerce(row)

    def test_nan_pl_rejected(self):
        with pytest.raises(InvalidInput):
            TradeRecord.coerce({"timestamp": "2024-01-01T09:00:00Z", "netPl": float("nan")})

    def test_records_are_immutable(self, make_trade):
        trade = make_trade()
        with pytest.raises(ValidationError):
            trade.net_pl = 0.0


class TestParseTimestamp:
    def test_iso_string(self):
        assert parse_timestamp("2024-03-05T23:15:00Z").hour == 23

    def test_datetime_passthrough(self):
        ts = datetime(2024, 3, 5, 4, tzinfo=timezone.utc)
        assert parse_timestamp(ts) == ts

    def test_garbage(self):
        with pytest.raises(InvalidInput):
            parse_timestamp("yesterday-ish")


class TestTradeIntent:
    def test_defaults_are_false(self):
        intent = TradeIntent()
        assert not intent.htf_bias_clear
        assert not intent.entry_confirmed
        assert intent.zone_validity is None

    def test_camel_case_keys(self):
        intent = TradeIntent.coerce({"htfBiasClear": True, "zoneValidity": "invalid"})
        assert intent.htf_bias_clear
        assert intent.zone_validity == ZoneValidity.INVALID

    def test_free_text_zone_validity_is_unknown(self):
        intent = TradeIntent.coerce({"zoneValidity": "Fresh"})
        assert intent.zone_validity == ZoneValidity.UNKNOWN

    def test_non_boolean_checklist_value(self):
        with pytest.raises(InvalidInput, match="htf"):
            TradeIntent.coerce({"htfBiasClear": "perhaps"})
