"""
Unit tests for the birthday window and needs-contact queries.
"""

from datetime import date, timedelta

import pytest
from sqlalchemy.orm import Session

from friends_crm import birthdays, crud
from friends_crm.errors import ValidationError


def add_friend(db_session: Session, owner_id: int, name: str, **fields):
    return crud.create_friend(db_session, owner_id, {"name": name, **fields})


@pytest.mark.parametrize("birthday, as_of, expected", [
    (date(1990, 6, 15), date(2024, 6, 1), date(2024, 6, 15)),
    (date(1990, 6, 15), date(2024, 6, 15), date(2024, 6, 15)),
    (date(1990, 6, 15), date(2024, 6, 16), date(2025, 6, 15)),
    (date(1985, 1, 10), date(2024, 12, 20), date(2025, 1, 10)),
    (date(2000, 2, 29), date(2024, 2, 1), date(2024, 2, 29)),
    (date(2000, 2, 29), date(2023, 2, 1), date(2023, 3, 1)),
    (date(2000, 2, 29), date(2024, 3, 2), date(2025, 3, 1)),
])
def test_next_birthday(birthday, as_of, expected):
    assert birthdays.next_birthday(birthday, as_of) == expected


def test_is_upcoming_window_edges():
    as_of = date(2024, 5, 1)
    assert birthdays.is_upcoming(date(1990, 5, 1), as_of, 0)
    assert birthdays.is_upcoming(date(1990, 5, 31), as_of, 30)
    assert not birthdays.is_upcoming(date(1990, 6, 1), as_of, 30)
    assert not birthdays.is_upcoming(date(1990, 4, 30), as_of, 30)
    assert not birthdays.is_upcoming(None, as_of, 30)
    assert birthdays.is_upcoming(date(1990, 4, 30), as_of, 400)
    assert birthdays.is_upcoming(date(1990, 4, 30), as_of, 10 ** 9)


def test_upcoming_birthdays_wraps_year_end(db_session: Session, user):
    add_friend(db_session, user.id, "January", birthday=date(1985, 1, 10))
    add_friend(db_session, user.id, "July", birthday=date(1985, 7, 1))

    names = [f.name for f in birthdays.upcoming_birthdays(db_session, user.id, days=30, as_of=date(2024, 12, 20))]
    assert names == ["January"]


def test_upcoming_birthdays_excludes_far_away(db_session: Session, user):
    add_friend(db_session, user.id, "July", birthday=date(1985, 7, 1))

    assert birthdays.upcoming_birthdays(db_session, user.id, days=30, as_of=date(2024, 1, 1)) == []


def test_upcoming_birthdays_ordered_by_month_day_then_id(db_session: Session, user):
    as_of = date(2024, 12, 20)
    add_friend(db_session, user.id, "Dec 28", birthday=date(1970, 12, 28))
    second = add_friend(db_session, user.id, "Jan 2 b", birthday=date(2001, 1, 2))
    add_friend(db_session, user.id, "Dec 21", birthday=date(1999, 12, 21))
    first = add_friend(db_session, user.id, "Jan 2 a", birthday=date(1960, 1, 2))
    add_friend(db_session, user.id, "No birthday")

    result = birthdays.upcoming_birthdays(db_session, user.id, days=30, as_of=as_of)
    # ordering follows month and day, so January sorts ahead of December
    assert [f.name for f in result] == ["Jan 2 b", "Jan 2 a", "Dec 21", "Dec 28"]
    assert second.id < first.id


def test_upcoming_birthdays_owner_scoped(db_session: Session, user, other_user):
    add_friend(db_session, other_user.id, "Not mine", birthday=date(1990, 3, 5))

    assert birthdays.upcoming_birthdays(db_session, user.id, as_of=date(2024, 3, 1)) == []


def test_upcoming_birthdays_feb_29_in_non_leap_year(db_session: Session, user):
    add_friend(db_session, user.id, "Leapling", birthday=date(2000, 2, 29))

    assert [f.name for f in birthdays.upcoming_birthdays(db_session, user.id, days=0, as_of=date(2023, 3, 1))] == ["Leapling"]
    assert birthdays.upcoming_birthdays(db_session, user.id, days=0, as_of=date(2023, 2, 28)) == []


def test_upcoming_birthdays_negative_days(db_session: Session, user):
    with pytest.raises(ValidationError) as exc_info:
        birthdays.upcoming_birthdays(db_session, user.id, days=-1)
    assert exc_info.value.errors[0]["field"] == "days"


def test_needs_contact_threshold(db_session: Session, user):
    as_of = date(2024, 6, 30)
    add_friend(db_session, user.id, "31 days", last_contact_date=as_of - timedelta(days=31))
    add_friend(db_session, user.id, "30 days", last_contact_date=as_of - timedelta(days=30))
    add_friend(db_session, user.id, "29 days", last_contact_date=as_of - timedelta(days=29))
    add_friend(db_session, user.id, "Never")

    names = [f.name for f in birthdays.needs_contact(db_session, user.id, threshold_days=30, as_of=as_of)]
    assert names == ["Never", "31 days"]


def test_needs_contact_null_included_regardless_of_threshold(db_session: Session, user):
    add_friend(db_session, user.id, "Never")

    result = birthdays.needs_contact(db_session, user.id, threshold_days=10000, as_of=date(2024, 1, 1))
    assert [f.name for f in result] == ["Never"]


def test_needs_contact_orders_oldest_first_and_limits(db_session: Session, user):
    as_of = date(2024, 6, 30)
    for days_ago in (40, 90, 60, 200, 35, 120, 75):
        add_friend(db_session, user.id, f"{days_ago} days", last_contact_date=as_of - timedelta(days=days_ago))
    add_friend(db_session, user.id, "Never")

    result = birthdays.needs_contact(db_session, user.id, as_of=as_of, limit=6)
    assert [f.name for f in result] == ["Never", "200 days", "120 days", "90 days", "75 days", "60 days"]


def test_needs_contact_owner_scoped(db_session: Session, user, other_user):
    add_friend(db_session, other_user.id, "Not mine")

    assert birthdays.needs_contact(db_session, user.id, as_of=date(2024, 1, 1)) == []
