"""Decoding and encoding of raw jump dates.

The legacy store keeps ``ZDATE`` as a bare integer whose unit is not recorded.
Values are disambiguated by range:

* ``100_000 < raw < 5_000_000_000``: seconds since 2001-01-01 UTC
* ``raw >= 5_000_000_000``: milliseconds since 2001-01-01 UTC
* ``0 < raw <= 100_000``: seconds since the Unix epoch
* anything else: no date

The thresholds were inferred from observed data and must not be adjusted.
"""

from datetime import date, datetime, time, timedelta, timezone

from ..config.settings import get_date_format

REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SECONDS_LOWER_BOUND = 100_000
MILLISECONDS_THRESHOLD = 5_000_000_000


def decode_jump_date(raw: int | None) -> datetime | None:
    """Decode a raw ``ZDATE`` value into an aware UTC datetime."""
    if raw is None:
        return None

    if SECONDS_LOWER_BOUND < raw < MILLISECONDS_THRESHOLD:
        return REFERENCE_EPOCH + timedelta(seconds=raw)

    if raw >= MILLISECONDS_THRESHOLD:
        return REFERENCE_EPOCH + timedelta(milliseconds=raw)

    if raw > 0:
        return UNIX_EPOCH + timedelta(seconds=raw)

    return None


def encode_jump_date(value: date | datetime) -> int:
    """Encode a date as whole seconds since the 2001 reference epoch.

    Plain dates are taken as midnight UTC of that day; naive datetimes are
    assumed to be UTC.
    """
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        moment = datetime.combine(value, time.min, tzinfo=timezone.utc)
    return int((moment - REFERENCE_EPOCH).total_seconds())


def format_local_date(value: datetime | None, date_format: str | None = None) -> str:
    """Render a UTC datetime as local date text, empty when absent."""
    if value is None:
        return ""
    return value.astimezone().strftime(date_format or get_date_format())
