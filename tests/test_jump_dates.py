"""Tests for raw jump date decoding and encoding."""

from datetime import date, datetime, timedelta, timezone

from baselog.domain.jump_dates import (
    REFERENCE_EPOCH,
    decode_jump_date,
    encode_jump_date,
    format_local_date,
)


def test_seconds_since_reference_epoch():
    """Test mid-range values are seconds since 2001."""
    decoded = decode_jump_date(500_000_000)
    assert decoded == REFERENCE_EPOCH + timedelta(seconds=500_000_000)
    assert decoded.year == 2016


def test_milliseconds_since_reference_epoch():
    """Test large values are milliseconds since 2001."""
    decoded = decode_jump_date(6_000_000_000)
    assert decoded == REFERENCE_EPOCH + timedelta(milliseconds=6_000_000_000)
    assert decoded.year == 2001


def test_small_values_fall_back_to_unix_seconds():
    """Test small positive values are Unix seconds."""
    assert decode_jump_date(50) == datetime(1970, 1, 1, 0, 0, 50, tzinfo=timezone.utc)


def test_non_positive_values_have_no_date():
    """Test zero, negative and missing values decode to None."""
    assert decode_jump_date(0) is None
    assert decode_jump_date(-10) is None
    assert decode_jump_date(None) is None


def test_threshold_boundaries():
    """Test values at the exact thresholds."""
    # 100_000 itself is not in the seconds-since-2001 range
    assert decode_jump_date(100_000).year == 1970
    assert decode_jump_date(100_001) == REFERENCE_EPOCH + timedelta(seconds=100_001)
    assert decode_jump_date(4_999_999_999) == REFERENCE_EPOCH + timedelta(
        seconds=4_999_999_999
    )
    assert decode_jump_date(5_000_000_000) == REFERENCE_EPOCH + timedelta(
        milliseconds=5_000_000_000
    )


def test_encode_reads_back_as_same_day():
    """Test encoded dates decode to midnight UTC of that day."""
    raw = encode_jump_date(date(2016, 5, 14))
    assert decode_jump_date(raw) == datetime(2016, 5, 14, tzinfo=timezone.utc)


def test_encode_naive_datetime_is_utc():
    """Test naive datetimes are treated as UTC."""
    raw = encode_jump_date(datetime(2020, 1, 2, 3, 4, 5))
    assert decode_jump_date(raw) == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_format_local_date():
    """Test display text uses the requested format in local time."""
    moment = datetime(2016, 5, 14, 12, 0, tzinfo=timezone.utc)
    expected = moment.astimezone().strftime("%Y-%m-%d")
    assert format_local_date(moment, "%Y-%m-%d") == expected
    assert format_local_date(None) == ""
