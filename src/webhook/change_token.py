"""SharePoint change tokens for list-scoped change queries."""

from datetime import datetime, timedelta, timezone

CHANGE_TOKEN_VERSION = 1
CHANGE_TOKEN_SCOPE_LIST = 3
# .NET ticks (100 ns since 0001-01-01) at the Unix epoch
UNIX_EPOCH_TICKS = 621355968000000000
TICKS_PER_MILLISECOND = 10_000

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def change_token_ticks(when: datetime) -> int:
    """Ticks value for ``when`` as used in the 4th segment of a change token (millisecond precision)."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    unix_millis = (when - _UNIX_EPOCH) // timedelta(milliseconds=1)
    return unix_millis * TICKS_PER_MILLISECOND + UNIX_EPOCH_TICKS


def encode_change_token(offset_minutes: int, resource_id: str, now: datetime | None = None) -> str:
    """Build ``"1;3;{resource_id};{ticks};-1"`` for the instant ``now + offset_minutes``.

    A negative offset points into the past, e.g. -15 asks for changes of the last
    15 minutes. resource_id is not escaped, so it must not contain ';'.
    """
    now = now or datetime.now(timezone.utc)
    ticks = change_token_ticks(now + timedelta(minutes=offset_minutes))
    return f"{CHANGE_TOKEN_VERSION};{CHANGE_TOKEN_SCOPE_LIST};{resource_id};{ticks};-1"
