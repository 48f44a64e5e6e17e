"""Tests for the forward-only stream cursor."""

import pytest

from nbbo_app.errors import OrderingViolationError
from nbbo_app.sync.cursor import StreamCursor


class TestStreamCursor:
    """Pull semantics and ordering checks."""

    def test_advances_in_order(self, trade_factory):
        """Records come back one at a time, then None."""
        trades = [trade_factory(time=100), trade_factory(time=101)]
        cursor = StreamCursor(trades, "trades")

        assert cursor.current is None
        assert cursor.advance().time == 100
        assert cursor.current.time == 100
        assert cursor.advance().time == 101
        assert cursor.advance() is None
        assert cursor.exhausted
        assert cursor.consumed == 2

    def test_stays_exhausted(self, trade_factory):
        """Advancing an exhausted cursor keeps returning None."""
        cursor = StreamCursor([], "trades")

        assert cursor.advance() is None
        assert cursor.advance() is None
        assert cursor.consumed == 0

    def test_equal_keys_allowed(self, trade_factory):
        """Keys need only be non-decreasing."""
        cursor = StreamCursor([trade_factory(time=100), trade_factory(time=100)], "trades")

        assert cursor.advance() is not None
        assert cursor.advance() is not None

    def test_decreasing_key_raises(self, trade_factory):
        """A key smaller than its predecessor is an ordering violation."""
        cursor = StreamCursor([trade_factory(symbol="BBB"), trade_factory(symbol="AAA")], "trades")
        cursor.advance()

        with pytest.raises(OrderingViolationError) as exc_info:
            cursor.advance()

        assert exc_info.value.previous_key[1] == "BBB"
        assert exc_info.value.current_key[1] == "AAA"
