from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import Optional

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Resolve 'sqlite:///./relative/path' to an absolute sqlite:/// URL.

    Keeps other URL forms unchanged.
    """
    prefix = "sqlite:///./"
    if not url.startswith(prefix):
        return url
    rel = url[len(prefix) :]
    return f"sqlite:///{(project_root / rel).resolve()}"


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds.

    Naive datetimes are interpreted as local wall-clock time, matching
    :meth:`datetime.timestamp`.
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def from_epoch_ms(ms: int, tz: Optional[timezone] = None) -> datetime:
    """Convert epoch milliseconds back to an aware datetime.

    The result is expressed in ``tz`` when given, otherwise in the local
    timezone.
    """
    dt = _EPOCH + timedelta(milliseconds=ms)
    return dt.astimezone(tz) if tz is not None else dt.astimezone()


def dt_iso(dt: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to an ISO 8601 string in UTC, or return None.

    This is a small helper intended for serializing timestamps in JSON.
    """
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat()
