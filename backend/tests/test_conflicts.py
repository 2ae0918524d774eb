from datetime import date, datetime, timedelta, timezone

import pytest

from eventdesk.conflicts import ConflictAdvisory, find_conflict
from eventdesk.dates import calendar_key, to_calendar_date
from eventdesk.models import Event


def _event(event_id: str, day: date, title: str = "Wedding") -> Event:
    return Event(id=event_id, title=title, date=day)


def test_returns_first_event_on_same_day_in_caller_order():
    events = [
        _event("a", date(2025, 11, 19)),
        _event("b", date(2025, 11, 20), "Gala"),
        _event("c", date(2025, 11, 20), "Party"),
    ]

    assert find_conflict(date(2025, 11, 20), events).id == "b"
    assert find_conflict(date(2025, 11, 20), list(reversed(events))).id == "c"


def test_no_conflict_when_days_differ_or_list_empty():
    assert find_conflict(date(2025, 11, 21), [_event("a", date(2025, 11, 20))]) is None
    assert find_conflict(date(2025, 11, 21), []) is None


@pytest.mark.parametrize(
    "candidate",
    [
        "2025-11-20",
        "2025-11-20T00:00:00Z",
        "2025-11-20T00:00:00-03:00",
        "2025-11-20T23:59:00+09:00",
        datetime(2025, 11, 20, 0, 0, tzinfo=timezone(timedelta(hours=-3))),
        datetime(2025, 11, 20, 23, 30),
    ],
)
def test_calendar_day_comparison_ignores_offsets(candidate):
    events = [_event("a", date(2025, 11, 20))]

    assert find_conflict(candidate, events) is events[0]


def test_utc_midnight_is_not_shifted_to_previous_day():
    assert calendar_key("2025-11-20T00:00:00.000Z") == (2025, 11, 20)
    assert to_calendar_date("2025-01-01 00:00:00") == date(2025, 1, 1)


@pytest.mark.parametrize("bad", ["2025-13-01", "2025-02-30", "20/11/2025", ""])
def test_malformed_date_strings_are_rejected(bad):
    with pytest.raises(ValueError):
        calendar_key(bad)


def test_advisory_message_names_the_booked_event():
    advisory = ConflictAdvisory(_event("a", date(2025, 11, 20), "Silva Wedding"))

    assert advisory.message == "2025-11-20 is already booked: Silva Wedding"
