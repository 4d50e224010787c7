import datetime as dt
import typing as t
import uuid


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def ensure_utc(value: dt.datetime) -> dt.datetime:
    """Storages that drop tzinfo (SQLite) hand back naive datetimes; those are UTC by convention."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def coerce_uuid(value: t.Any, field: str, error: type[Exception]) -> uuid.UUID:
    if value is None:
        raise error(f"{field} is required")
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise error(f"{field} must be a valid UUID, got '{value}'") from None


def check_optional_length(value: t.Any, limit: int, field: str, error: type[Exception]) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise error(f"{field} must be a string")
    if len(value) > limit:
        raise error(f"{field} must be at most {limit} characters long (got {len(value)})")
    return value
