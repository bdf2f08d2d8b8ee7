from datetime import datetime, timedelta, timezone

import pytest

from newsarchive.processors.timestamps import parse_offset, parse_publish_time

ICT = timezone(timedelta(hours=7))


@pytest.mark.parametrize(
    "value",
    [
        "2024-05-20T08:00:00+07:00",
        "2024-05-20T08:00:00+0700",
        "2024-05-20T08:00:00.000+07:00",
    ],
)
def test_offset_grammars(value):
    assert parse_publish_time(value, "+00:00") == datetime(2024, 5, 20, 8, 0, tzinfo=ICT)


def test_zulu_suffix_is_utc():
    dt = parse_publish_time("2024-05-20T01:00:00Z", "+07:00")

    assert dt.utcoffset() == timedelta(0)
    assert dt == datetime(2024, 5, 20, 8, 0, tzinfo=ICT)


def test_missing_offset_uses_publisher_default():
    dt = parse_publish_time("2024-05-20T08:00:00", "+07:00")

    assert dt.utcoffset() == timedelta(hours=7)
    assert (dt.hour, dt.minute) == (8, 0)


def test_default_offset_is_appended_before_retrying_grammars():
    # No seconds and no offset: only the retry with "+07:00" appended parses.
    dt = parse_publish_time("2024-05-20T08:00", "+07:00")

    assert dt == datetime(2024, 5, 20, 8, 0, tzinfo=ICT)


@pytest.mark.parametrize("value", ["", "   ", "hôm qua", "20/05/2024 08:00", None, 1716166800])
def test_unparseable_values(value):
    assert parse_publish_time(value, "+07:00") is None


def test_parse_offset():
    assert parse_offset("+07:00") == ICT
    assert parse_offset("+0700") == ICT
    assert parse_offset("-05:30") == timezone(-timedelta(hours=5, minutes=30))
    assert parse_offset("Z") == timezone.utc
    with pytest.raises(ValueError):
        parse_offset("ICT")


def test_publish_time_beyond_utc_range_is_rejected():
    assert parse_publish_time("9999-12-31T23:00:00-05:00", "+07:00") is None
    assert parse_publish_time("0001-01-01T01:00:00+07:00", "+07:00") is None
