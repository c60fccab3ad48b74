from datetime import timedelta

import pytest

from braillechord.durations import format_duration, parse_duration


@pytest.mark.parametrize(
    "delta,expected",
    (
        (timedelta(), "0"),
        (timedelta(microseconds=1), "1us"),
        (timedelta(microseconds=250), "250us"),
        (timedelta(milliseconds=1), "1ms"),
        (timedelta(milliseconds=50), "50ms"),
        (timedelta(milliseconds=1, microseconds=500), "1.5ms"),
        (timedelta(seconds=1), "1s"),
        (timedelta(seconds=1, milliseconds=500), "1.5s"),
        (timedelta(milliseconds=-90), "-90ms"),
        (timedelta(seconds=-2), "-2s"),
    ),
)
def test_format_duration(delta: timedelta, expected: str):
    actual = format_duration(delta)
    assert actual == expected


@pytest.mark.parametrize(
    "duration,expected",
    (
        ("0", timedelta()),
        ("-0", timedelta()),
        ("+0", timedelta()),
        ("0s", timedelta()),
        ("1us", timedelta(microseconds=1)),
        ("50ms", timedelta(milliseconds=50)),
        ("1.5ms", timedelta(milliseconds=1, microseconds=500)),
        ("0.09s", timedelta(milliseconds=90)),
        ("2s", timedelta(seconds=2)),
        ("90", timedelta(milliseconds=90)),
        (" 90ms ", timedelta(milliseconds=90)),
        ("-20ms", timedelta(milliseconds=-20)),
        (90, timedelta(milliseconds=90)),
        (12.5, timedelta(milliseconds=12, microseconds=500)),
    ),
)
def test_parse_duration(duration, expected: timedelta):
    actual = parse_duration(duration)
    assert actual == expected


@pytest.mark.parametrize(
    "duration,msg",
    (
        ("", "Empty duration string"),
        ("ms", "Invalid duration string; expected number"),
        (".5ms", "Invalid duration string; expected leading digit"),
        ("1.2.3ms", "Invalid duration string; malformed number"),
        ("5m", "Invalid duration string; unknown unit 'm'"),
        ("5ms3", "Invalid duration string; unknown unit 'ms3'"),
    ),
)
def test_parse_duration_invalid(duration: str, msg: str):
    with pytest.raises(ValueError) as excinfo:
        parse_duration(duration)
    e = excinfo.value
    assert e.args[0] == msg


@pytest.mark.parametrize("delta", (timedelta(milliseconds=50), timedelta(microseconds=750), timedelta(seconds=1, milliseconds=250)))
def test_format_then_parse(delta: timedelta):
    assert parse_duration(format_duration(delta)) == delta
