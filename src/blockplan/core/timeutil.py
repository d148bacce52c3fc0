from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from .errors import InvalidConfigurationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# Raw (level 1) block width a Prometheus head block is cut at.
BLOCK_ALIGN_MS = 2 * MS_PER_HOUR

_UNIT_MS = {
    "y": 365 * MS_PER_DAY,
    "w": 7 * MS_PER_DAY,
    "d": MS_PER_DAY,
    "h": MS_PER_HOUR,
    "m": MS_PER_MINUTE,
    "s": MS_PER_SECOND,
    "ms": 1,
}

_DURATION_RE = re.compile(
    r"^(?:(?P<y>\d+)y)?(?:(?P<w>\d+)w)?(?:(?P<d>\d+)d)?(?:(?P<h>\d+)h)?"
    r"(?:(?P<m>\d+)m)?(?:(?P<s>\d+)s)?(?:(?P<ms>\d+)ms)?$"
)


def align_forward(timestamp_ms: int, width_ms: int) -> int:
    """
    Upper edge of the width-aligned bucket containing timestamp_ms.

    Mirrors how Prometheus/Thanos pick block boundaries: the result is a
    multiple of width_ms and always strictly greater than timestamp_ms.
    """
    if width_ms <= 0:
        raise InvalidConfigurationError(f"alignment width must be > 0, got {width_ms}")
    return (timestamp_ms // width_ms) * width_ms + width_ms


def parse_duration(text: str) -> int:
    """
    Parse a Prometheus-style duration ("2h", "1h30m", "67d", "500ms") into ms.
    """
    s = text.strip()
    m = _DURATION_RE.match(s)
    if not s or m is None or not any(m.groupdict().values()):
        raise InvalidConfigurationError(f"not a valid duration: {text!r}")
    total = 0
    for unit, value in m.groupdict().items():
        if value:
            total += int(value) * _UNIT_MS[unit]
    return total


def duration_ms(value: int | str | timedelta) -> int:
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"not a valid duration: {value!r}")
    if isinstance(value, timedelta):
        return int(value / timedelta(milliseconds=1))
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return parse_duration(value)
    raise InvalidConfigurationError(f"not a valid duration: {value!r}")


def format_duration(ms: int) -> str:
    """
    Inverse of parse_duration for display (largest units first, no years).
    """
    if ms == 0:
        return "0s"
    out = []
    rest = abs(ms)
    for unit in ("d", "h", "m", "s"):
        n, rest = divmod(rest, _UNIT_MS[unit])
        if n:
            out.append(f"{n}{unit}")
    if rest:
        out.append(f"{rest}ms")
    return ("-" if ms < 0 else "") + "".join(out)


def from_datetime(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int((dt - EPOCH) / timedelta(milliseconds=1))


def to_datetime(ms: int) -> datetime:
    return EPOCH + timedelta(milliseconds=ms)


def format_timestamp(ms: int) -> str:
    """
    Human readable UTC rendering of a ms timestamp, e.g.
    "2020-01-01 10:00:00 +0000 UTC" or "1970-01-01 00:00:00.25 +0000 UTC".
    """
    dt = to_datetime(ms)
    out = dt.strftime("%Y-%m-%d %H:%M:%S")
    frac = ms % MS_PER_SECOND
    if frac:
        out += "." + f"{frac:03d}".rstrip("0")
    return out + " +0000 UTC"


def _parse_rfc3339(text: str) -> datetime | None:
    s = text.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def resolve_upper_bound(value: int | str | datetime, now: datetime | None = None) -> int:
    """
    Resolve a time-or-duration value to an absolute ms timestamp.

    Accepts:
      - int: already a ms timestamp
      - datetime (naive = UTC)
      - RFC3339 string, e.g. "2020-01-01T00:00:00Z"
      - duration string relative to now, e.g. "-2h", "30m", "0s"
    """
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"not a time or duration: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        return from_datetime(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidConfigurationError(f"not a time or duration: {value!r}")

    dt = _parse_rfc3339(value)
    if dt is not None:
        return from_datetime(dt)

    s = value.strip()
    sign = 1
    if s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    offset = sign * parse_duration(s)
    base = now or datetime.now(timezone.utc)
    return from_datetime(base) + offset
