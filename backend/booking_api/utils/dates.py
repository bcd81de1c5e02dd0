from datetime import datetime, timezone
from typing import Any, Optional


def to_iso(v: Any) -> Optional[str]:
    """
    datetime (aware/naive) | Firestore Timestamp | str | None -> ISO-8601 string in UTC.
    Naive datetimes are taken as UTC. Strings are stored as the caller sent them.
    """
    if v is None:
        return None
    if isinstance(v, str):
        return v
    # Firestore Timestamp nesneleri to_datetime() destekler
    if not isinstance(v, datetime) and hasattr(v, "to_datetime"):
        v = v.to_datetime()
    if isinstance(v, datetime):
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        v = v.astimezone(timezone.utc)
        return v.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    raise TypeError(f"Cannot convert {type(v).__name__} to an ISO timestamp")


def utc_now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))
