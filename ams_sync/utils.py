from __future__ import annotations

import re
from datetime import datetime, timezone

# fromisoformat on 3.10 wants exactly 3 or 6 fractional digits; servers send 1 to 7.
_FRACTION_RE = re.compile(r"\.(\d+)")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return `dt` as the same instant in UTC. Naive datetimes are refused."""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValueError(f"Bookmark must be timezone-aware (UTC), got naive datetime {dt.isoformat()}")
    return dt.astimezone(timezone.utc)


def parse_utc(s: str) -> datetime:
    """Parse an ISO-8601 timestamp from the wire.

    Naive values are treated as UTC; offsets are converted to UTC.
    """
    s = s.strip()
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    s = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], s)
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def as_iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_odata_timestamp(dt: datetime) -> str:
    """yyyy-MM-ddTHH:mm:ssZ, second precision."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
