"""Duration strings for settings files, in a subset of Go's Duration format ("50ms", "1.5s", "250us").

Bare numbers are taken as milliseconds, since that is how debounce values are usually written down.
"""
import datetime
import decimal

from .util import maybe_int

UNITS = {
    "us": datetime.timedelta(microseconds=1),
    "ms": datetime.timedelta(milliseconds=1),
    "s": datetime.timedelta(seconds=1),
}


def format_duration(val: datetime.timedelta) -> str:
    if val == datetime.timedelta():
        return "0"
    sign = ""
    if val < datetime.timedelta():
        sign = "-"
        val = -val
    if val < UNITS["ms"]:
        return f"{sign}{val.microseconds}us"
    if val < UNITS["s"]:
        return f"{sign}{maybe_int(val / UNITS['ms'])}ms"
    return f"{sign}{maybe_int(val.total_seconds())}s"


def parse_duration(val: str | int | float) -> datetime.timedelta:
    if isinstance(val, (int, float)):
        return datetime.timedelta(milliseconds=val)
    val = val.strip()
    sign = 1
    if val.startswith("-"):
        sign = -1
        val = val[1:]
    elif val.startswith("+"):
        val = val[1:]
    if len(val) == 0:
        raise ValueError("Empty duration string")

    numberpart = ""
    while len(val) > 0 and (val[0].isdigit() or val[0] == "."):
        numberpart += val[0]
        val = val[1:]
    if len(numberpart) == 0:
        raise ValueError("Invalid duration string; expected number")
    if not numberpart[0].isdigit():
        raise ValueError("Invalid duration string; expected leading digit")
    try:
        number = decimal.Decimal(numberpart)
    except decimal.InvalidOperation:
        raise ValueError("Invalid duration string; malformed number") from None

    unit_name = val or "ms"
    if unit_name not in UNITS:
        raise ValueError(f"Invalid duration string; unknown unit {unit_name!r}")
    num, denom = number.as_integer_ratio()
    return sign * num * UNITS[unit_name] / denom
