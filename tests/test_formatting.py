"""
Tests for message formatting helpers.
"""

import pytest

from contextlog.formatting import (
    compact,
    exception_backtrace,
    exception_message,
    render_data,
    resolve_message,
)


class TestCompact:
    """Test suite for message compaction."""

    def test_short_message_unchanged(self):
        assert compact("hello", 10) == "hello"

    def test_message_at_limit_unchanged(self):
        assert compact("a" * 10, 10) == "a" * 10

    def test_long_message_keeps_head_and_tail(self):
        """A 25 character message with limit 10 keeps chars 0-9 and 15-24."""
        msg = "abcdefghijklmnopqrstuvwxy"
        assert len(msg) == 25

        result = compact(msg, 10)

        assert result == "abcdefghij" + "..." + "pqrstuvwxy"
        assert result == msg[:10] + "..." + msg[15:]

    def test_overlapping_halves_below_twice_the_limit(self):
        """Messages shorter than twice the limit repeat their middle."""
        msg = "abcdefghijklmno"  # 15 chars

        result = compact(msg, 10)

        assert result == "abcdefghij...fghijklmno"
        assert "fghij" in result[:10] and "fghij" in result[13:]

    def test_non_string_values_rendered(self):
        assert compact(12345, 3) == "123...345"
        assert compact(None, 3) == ""


class TestRenderData:
    def test_renders_in_insertion_order(self):
        data = {'b': 1, 'a': 'x', 'c': [1, 2]}
        assert render_data(data) == "b: 1, a: 'x', c: [1, 2]"

    def test_empty_data(self):
        assert render_data({}) == ""


class TestExceptionHelpers:
    def test_exception_message(self):
        assert exception_message(ValueError("bad value")) == "bad value"

    def test_exception_without_message_falls_back_to_repr(self):
        assert exception_message(KeyboardInterrupt()) == "KeyboardInterrupt()"

    def test_no_exception(self):
        assert exception_message(None) is None
        assert exception_backtrace(None) == []

    def test_backtrace_of_unraised_exception_is_empty(self):
        assert exception_backtrace(ValueError("never raised")) == []

    def test_backtrace_of_raised_exception(self):
        def explode():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError) as excinfo:
            explode()

        frames = exception_backtrace(excinfo.value)
        assert len(frames) >= 2
        assert frames[-1].endswith("in explode")
        assert "test_formatting.py" in frames[-1]


class FakeExc:
    """Exception-like object that is not a BaseException."""

    message = "quota exceeded"

    def __str__(self):
        return "FakeExc: quota exceeded"


class TestExceptionLikeObjects:
    """Objects that only look like exceptions are still rendered."""

    def test_message_attribute_preferred(self):
        assert exception_message(FakeExc()) == "quota exceeded"

    def test_falls_back_to_str_without_message_attribute(self):
        class Opaque:
            def __str__(self):
                return "opaque failure"

        assert exception_message(Opaque()) == "opaque failure"

    def test_backtrace_without_traceback_attribute(self):
        assert exception_backtrace(FakeExc()) == []

    def test_backtrace_from_frame_list(self):
        exc = FakeExc()
        exc.backtrace = ["worker.py:10 in run", "job.py:3 in call"]

        assert exception_backtrace(exc) == ["worker.py:10 in run", "job.py:3 in call"]

    def test_resolve_message_uses_message_attribute(self):
        assert resolve_message("prog", exception=FakeExc()) == "quota exceeded"


class TestResolveMessage:
    """Priority: producer > message > exception message > progname."""

    def test_producer_wins(self):
        result = resolve_message(
            "prog",
            exception=ValueError("exc"),
            message="msg",
            producer=lambda: "produced"
        )
        assert result == "produced"

    def test_message_before_exception(self):
        assert resolve_message("prog", exception=ValueError("exc"), message="msg") == "msg"

    def test_exception_before_progname(self):
        assert resolve_message("prog", exception=ValueError("exc")) == "exc"

    def test_progname_last(self):
        assert resolve_message("prog") == "prog"

    def test_producer_returning_none_falls_through(self):
        assert resolve_message("prog", producer=lambda: None) == "prog"

    def test_nothing_given(self):
        assert resolve_message() is None
