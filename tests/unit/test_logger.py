"""Tests for trace_id propagation in structured logging."""

import contextvars

from trade_intelligence.observability.logger import (
    _add_trace_id,
    get_trace_id,
    new_trace_id,
)


def _in_fresh_context(fn):
    return contextvars.Context().run(fn)


class TestTraceId:
    def test_unset_by_default(self):
        assert _in_fresh_context(get_trace_id) == ""

    def test_reading_does_not_create_one(self):
        def read_twice():
            get_trace_id()
            return get_trace_id()

        assert _in_fresh_context(read_twice) == ""

    def test_new_trace_id_is_current(self):
        def run():
            tid = new_trace_id()
            return tid, get_trace_id()

        tid, current = _in_fresh_context(run)
        assert tid
        assert current == tid


class TestAddTraceIdProcessor:
    def test_adds_current_trace_id(self):
        def run():
            tid = new_trace_id()
            return tid, _add_trace_id(None, "info", {"event": "x"})

        tid, event = _in_fresh_context(run)
        assert event["trace_id"] == tid

    def test_omitted_without_trace_id(self):
        event = _in_fresh_context(lambda: _add_trace_id(None, "info", {"event": "x"}))
        assert "trace_id" not in event
