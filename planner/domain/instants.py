"""Resolution of stored start values into timezone-aware instants."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo

logger = logging.getLogger(__name__)


def ensure_aware(value: datetime, default_tz: tzinfo) -> datetime:
    """Attach *default_tz* to a naive datetime; aware values pass through."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=default_tz)
    return value


def is_aware(value: object) -> bool:
    return (
        isinstance(value, datetime)
        and value.tzinfo is not None
        and value.utcoffset() is not None
    )


def resolve_instant(value: object, default_tz: tzinfo) -> datetime | None:
    """Resolve a stored start value into an aware datetime.

    Accepts datetimes and ISO 8601 strings. Relative or free-form text never
    reads the clock here; such input goes through
    ``planner.services.parser.compose_due`` with an explicit ``now``.
    Returns ``None`` for missing or unresolvable values so that a malformed
    record only unschedules its own task.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value, default_tz)
    if not isinstance(value, str):
        logger.warning("Ignoring start of unsupported type %s", type(value).__name__)
        return None

    raw = value.strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Could not resolve start %r; treating task as unscheduled", raw)
        return None
    return ensure_aware(parsed, default_tz)
