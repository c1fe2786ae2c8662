"""
Date-window queries over a user's friends: upcoming birthdays and friends
who have not been contacted for a while.

Birthdays are matched on month and day only, so a window that starts in
December can pick up January birthdays of the next year. A birthday on
February 29 is celebrated on March 1 in non-leap years.
"""

import calendar
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from friends_crm import models
from friends_crm.errors import ValidationError

DEFAULT_BIRTHDAY_WINDOW_DAYS = 30
DEFAULT_CONTACT_THRESHOLD_DAYS = 30
DEFAULT_NEEDS_CONTACT_LIMIT = 6


def birthday_in_year(birthday: date, year: int) -> date:
    """Returns the date ``birthday`` falls on in ``year``; Feb 29 becomes Mar 1 outside leap years."""
    if birthday.month == 2 and birthday.day == 29 and not calendar.isleap(year):
        return date(year, 3, 1)
    return birthday.replace(year=year)


def next_birthday(birthday: date, as_of: date) -> date:
    """
    Returns the first occurrence of ``birthday`` on or after ``as_of``.

    Args:
        birthday (date): Birth date; its year is ignored.
        as_of (date): Reference date.

    Returns:
        date: The birthday in ``as_of.year``, or in the following year if it has already passed.
    """
    occurrence = birthday_in_year(birthday, as_of.year)
    if occurrence < as_of:
        occurrence = birthday_in_year(birthday, as_of.year + 1)
    return occurrence


def is_upcoming(birthday: Optional[date], as_of: date, days: int) -> bool:
    """Whether ``birthday`` next falls within ``[as_of, as_of + days]``."""
    if birthday is None:
        return False
    # next_birthday is never before as_of
    return (next_birthday(birthday, as_of) - as_of).days <= days


def upcoming_birthdays(
    db: Session,
    owner_id: int,
    days: int = DEFAULT_BIRTHDAY_WINDOW_DAYS,
    as_of: Optional[date] = None,
) -> List[models.Friend]:
    """
    Friends of ``owner_id`` whose birthday falls in the next ``days`` days, inclusive.

    Results are ordered by the birthday's month and day, then by friend id.

    Raises:
        ValidationError: If ``days`` is negative.
    """
    if days < 0:
        raise ValidationError.single("days", "must be greater than or equal to 0")
    as_of = as_of or date.today()

    candidates = db.query(models.Friend).filter(
        models.Friend.user_id == owner_id,
        models.Friend.birthday.isnot(None),
    ).all()

    matches = [friend for friend in candidates if is_upcoming(friend.birthday, as_of, days)]
    matches.sort(key=lambda friend: (friend.birthday.month, friend.birthday.day, friend.id))
    return matches


def needs_contact(
    db: Session,
    owner_id: int,
    threshold_days: int = DEFAULT_CONTACT_THRESHOLD_DAYS,
    as_of: Optional[date] = None,
    limit: int = DEFAULT_NEEDS_CONTACT_LIMIT,
) -> List[models.Friend]:
    """
    Friends of ``owner_id`` never contacted, or last contacted before ``as_of - threshold_days``.

    Friends without a contact date come first, then the longest-neglected ones.

    Raises:
        ValidationError: If ``threshold_days`` or ``limit`` is negative.
    """
    if threshold_days < 0:
        raise ValidationError.single("threshold_days", "must be greater than or equal to 0")
    if limit < 0:
        raise ValidationError.single("limit", "must be greater than or equal to 0")
    as_of = as_of or date.today()
    cutoff = as_of - timedelta(days=threshold_days)

    return db.query(models.Friend).filter(
        models.Friend.user_id == owner_id,
        or_(
            models.Friend.last_contact_date.is_(None),
            models.Friend.last_contact_date < cutoff,
        ),
    ).order_by(
        # NULL sorts first on every backend
        models.Friend.last_contact_date.isnot(None),
        models.Friend.last_contact_date.asc(),
        models.Friend.id.asc(),
    ).limit(limit).all()
