"""
Helpers de data/hora em UTC com timezone.

SQLite devolve datetimes sem tzinfo; `as_utc` normaliza valores lidos do
banco antes de comparações.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Datetime naive é tratado como UTC; com tzinfo, convertido para UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_utc(value: Optional[datetime]) -> Optional[str]:
    """Serializa como ISO 8601 em UTC com sufixo Z."""
    if value is None:
        return None
    value = as_utc(value).replace(tzinfo=None)
    return value.isoformat(timespec="seconds") + "Z"


def from_unix_timestamp(value: object) -> Optional[datetime]:
    """Converte timestamps Unix (Stripe) para datetime UTC."""
    if value is None or value == "":
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
