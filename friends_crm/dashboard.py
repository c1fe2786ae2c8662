"""
Dashboard summary for one user.
"""

import calendar
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from friends_crm import birthdays, crud, models, schemas

BIRTHDAY_WINDOW_DAYS = 30
RECENT_FRIENDS_LIMIT = 6
RECENT_INTERACTIONS_LIMIT = 10
NEEDS_CONTACT_THRESHOLD_DAYS = 30
NEEDS_CONTACT_LIMIT = 6


def month_bounds(as_of: date):
    """First and last day of the calendar month containing ``as_of``."""
    last_day = calendar.monthrange(as_of.year, as_of.month)[1]
    return as_of.replace(day=1), as_of.replace(day=last_day)


def count_interactions_in_month(db: Session, owner_id: int, as_of: date) -> int:
    first_day, last_day = month_bounds(as_of)
    return (
        db.query(models.Interaction)
        .join(models.Friend, models.Interaction.friend_id == models.Friend.id)
        .filter(
            models.Friend.user_id == owner_id,
            models.Interaction.interaction_date >= first_day,
            models.Interaction.interaction_date <= last_day,
        )
        .count()
    )


def recent_friends(db: Session, owner_id: int, limit: int = RECENT_FRIENDS_LIMIT):
    return crud.friends_query(db, owner_id).limit(limit).all()


def recent_interactions(db: Session, owner_id: int, limit: int = RECENT_INTERACTIONS_LIMIT):
    return crud.interactions_query(db, owner_id).limit(limit).all()


def build_dashboard(db: Session, owner_id: int, as_of: Optional[date] = None) -> schemas.DashboardOut:
    """
    Builds the dashboard for ``owner_id``.

    Every section is computed against the same ``as_of`` date (today by
    default), so the counts in ``stats`` always match the lists next to them.

    Args:
        db (Session): Database session.
        owner_id (int): User whose data is summarized.
        as_of (Optional[date]): Reference date.

    Returns:
        schemas.DashboardOut: Upcoming birthdays, recent friends and interactions,
        friends needing contact and summary counts.
    """
    as_of = as_of or date.today()

    upcoming = birthdays.upcoming_birthdays(db, owner_id, days=BIRTHDAY_WINDOW_DAYS, as_of=as_of)
    overdue = birthdays.needs_contact(
        db, owner_id, threshold_days=NEEDS_CONTACT_THRESHOLD_DAYS, as_of=as_of, limit=NEEDS_CONTACT_LIMIT
    )

    stats = schemas.DashboardStats(
        total_friends=crud.count_friends(db, owner_id),
        interactions_this_month=count_interactions_in_month(db, owner_id, as_of),
        upcoming_birthdays=len(upcoming),
        needs_contact=len(overdue),
    )

    return schemas.DashboardOut.model_validate({
        "as_of": as_of,
        "upcoming_birthdays": upcoming,
        "recent_friends": recent_friends(db, owner_id),
        "recent_interactions": recent_interactions(db, owner_id),
        "needs_contact": overdue,
        "stats": stats,
    }, from_attributes=True)
