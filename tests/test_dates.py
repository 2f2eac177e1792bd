import pytest
from datetime import date, datetime, timedelta

from storefront.utils.dates import (
    InvalidDateError,
    hours_until,
    local_midnight,
    parse_local_date,
    to_local_iso,
)


def test_parse_iso_string():
    assert parse_local_date('2026-12-24') == date(2026, 12, 24)

def test_parse_keeps_calendar_date_of_timestamps():
    assert parse_local_date('2026-12-24T23:30:00Z') == date(2026, 12, 24)
    assert parse_local_date('2026-12-24 08:15') == date(2026, 12, 24)
    assert parse_local_date(datetime(2026, 12, 24, 23, 59)) == date(2026, 12, 24)

@pytest.mark.parametrize('value', [
    '24/12/2026', '2026-13-01', '', 'tomorrow', '2026-12-24-garbage', '2026-12-24xyz',
    '2026-12-24T25:00:00', 20261224, None,
])
def test_parse_rejects_malformed_values(value):
    with pytest.raises(InvalidDateError):
        parse_local_date(value)

def test_invalid_date_error_is_a_value_error():
    assert issubclass(InvalidDateError, ValueError)

def test_local_midnight():
    assert local_midnight('2026-12-24') == datetime(2026, 12, 24, 0, 0)

def test_hours_until_uses_local_midnight():
    now = datetime(2026, 12, 21, 12, 0)
    assert hours_until('2026-12-24', now=now) == 60

def test_hours_until_is_negative_once_past():
    now = datetime(2026, 12, 24, 5, 0)
    assert hours_until(date(2026, 12, 24), now=now) == -5

def test_hours_until_defaults_to_wall_clock():
    tomorrow = date.today() + timedelta(days=1)
    assert 0 < hours_until(tomorrow) <= 24

def test_to_local_iso():
    assert to_local_iso(date(2026, 1, 5)) == '2026-01-05'
    assert to_local_iso(datetime(2026, 1, 5, 22, 0)) == '2026-01-05'
