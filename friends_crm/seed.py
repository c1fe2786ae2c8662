"""
Demo data for local development.

Running ``python -m friends_crm.seed`` creates (or reuses) the demo account
and fills it with friends and interactions:

* ordinary friends with randomly filled optional details;
* a few friends whose birthday falls in the next 30 days;
* a few friends last contacted more than 30 days ago.

Interactions are logged oldest first through ``crud.create_interaction``, so
each friend's ``last_contact_date`` ends up on its latest interaction.
"""

import logging
import os
import random
from datetime import date, timedelta
from typing import Dict, List, Optional

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from friends_crm import crud, models, schemas
from friends_crm.database import SessionLocal, create_db_and_tables

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"

FIRST_NAMES = [
    "Anna", "Ben", "Chloe", "Daniel", "Eva", "Felix", "Grace", "Hugo",
    "Iris", "Jonas", "Kate", "Leo", "Maya", "Nick", "Olga", "Paul",
]
LAST_NAMES = ["Adams", "Brown", "Clark", "Davis", "Evans", "Fisher", "Green", "Hill", "King", "Lewis"]
KID_NAMES = ["Emma", "Liam", "Olivia", "Noah", "Ava", "William", "Sophia", "James", "Mia", "Henry"]
COMPANIES = ["Acme", "Globex", "Initech", "Umbrella", "Stark Industries", "Wayne Enterprises"]
JOB_TITLES = ["Engineer", "Designer", "Teacher", "Nurse", "Accountant", "Product Manager", "Chef"]

DESCRIPTIONS = {
    models.InteractionType.call: [
        "Had a great catch-up call about work and life.",
        "Quick phone call to check in.",
        "Long conversation about family and upcoming plans.",
    ],
    models.InteractionType.text: [
        "Exchanged texts about weekend plans.",
        "Shared some funny memes.",
        "Brief text conversation about work.",
    ],
    models.InteractionType.email: [
        "Sent a long email catching up on recent events.",
        "Forwarded an interesting article and discussed it.",
        "Email about planning a get-together.",
    ],
    models.InteractionType.hangout: [
        "Spent the afternoon together over coffee.",
        "Went out for dinner.",
        "Watched a movie at their place.",
    ],
    models.InteractionType.meeting: [
        "Met for coffee to talk about a shared project.",
        "Business meeting that turned into a catch-up.",
    ],
    models.InteractionType.other: [
        "Bumped into them at the store.",
        "Saw them at a friend's party.",
    ],
}

FRIENDS_COUNT = 20
UPCOMING_BIRTHDAYS_COUNT = 3
NEEDS_CONTACT_COUNT = 4
HISTORY_DAYS = 90
CONTACT_THRESHOLD_DAYS = 30


def maybe(rng: random.Random, probability: float, value):
    return value if rng.random() < probability else None


def random_date(rng: random.Random, start: date, end: date) -> date:
    """Uniformly picks a date in ``[start, end]``."""
    return start + timedelta(days=rng.randint(0, (end - start).days))


def random_birthday(rng: random.Random, as_of: date) -> date:
    return random_date(rng, as_of.replace(year=as_of.year - 60, month=1, day=1),
                       as_of.replace(year=as_of.year - 18, month=1, day=1))


def upcoming_birthday(rng: random.Random, as_of: date) -> date:
    """A birth date whose next anniversary falls within 30 days of ``as_of``."""
    day = as_of + timedelta(days=rng.randint(0, 29))
    if (day.month, day.day) == (2, 29):
        day += timedelta(days=1)
    return day.replace(year=day.year - rng.randint(20, 40))


def random_friend(rng: random.Random, as_of: date) -> Dict:
    first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
    kids = rng.sample(KID_NAMES, rng.randint(1, 3)) if rng.random() < 0.3 else None
    return {
        "name": f"{first} {last}",
        "email": maybe(rng, 0.8, f"{first}.{last}{rng.randint(1, 99)}@example.com".lower()),
        "phone": maybe(rng, 0.7, f"+1555{rng.randint(1000000, 9999999)}"),
        "birthday": maybe(rng, 0.6, random_birthday(rng, as_of)),
        "anniversary": maybe(rng, 0.3, random_date(rng, as_of - timedelta(days=20 * 365), as_of)),
        "partner": maybe(rng, 0.4, f"{rng.choice(FIRST_NAMES)} {last}"),
        "kids": kids,
        "job_title": maybe(rng, 0.7, rng.choice(JOB_TITLES)),
        "company": maybe(rng, 0.7, rng.choice(COMPANIES)),
        "notes": maybe(rng, 0.6, f"Met {first} through {rng.choice(['work', 'school', 'friends', 'a hobby club'])}."),
    }


def interaction_dates(rng: random.Random, start: date, end: date, recent_from: Optional[date] = None) -> List[date]:
    """
    Three to eight dates in ``[start, end]``, plus one or two in
    ``[recent_from, end]`` a third of the time. Sorted oldest first.
    """
    dates = [random_date(rng, start, end) for _ in range(rng.randint(3, 8))]
    if recent_from is not None and rng.randint(1, 3) == 1:
        dates += [random_date(rng, recent_from, end) for _ in range(rng.randint(1, 2))]
    return sorted(dates)


def log_interactions(db: Session, owner_id: int, friend: models.Friend, dates: List[date], rng: random.Random) -> int:
    for day in dates:
        interaction_type = rng.choice(list(models.InteractionType))
        crud.create_interaction(db, owner_id, friend.id, {
            "type": interaction_type,
            "description": rng.choice(DESCRIPTIONS[interaction_type]),
            "interaction_date": day,
        })
    return len(dates)


def get_or_create_demo_user(db: Session) -> models.User:
    user = crud.get_user_by_email(db, DEMO_EMAIL)
    if user is None:
        user = crud.create_user(db, schemas.UserCreate(email=DEMO_EMAIL, password=DEMO_PASSWORD))
        logger.info("Demo user %s created", DEMO_EMAIL)
    return user


def seed_demo_data(
    db: Session,
    owner_id: int,
    as_of: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, int]:
    """
    Creates demo friends and interactions for ``owner_id``.

    Args:
        db (Session): Database session.
        owner_id (int): User receiving the data.
        as_of (Optional[date]): Reference date for birthdays and contact history; defaults to today.
        rng (Optional[random.Random]): Random source; pass a seeded one for repeatable data.

    Returns:
        Dict[str, int]: Number of friends and interactions created.
    """
    as_of = as_of or date.today()
    rng = rng or random.Random()
    history_start = as_of - timedelta(days=HISTORY_DAYS)
    overdue_end = as_of - timedelta(days=CONTACT_THRESHOLD_DAYS + 1)

    friends_created = 0
    interactions_created = 0

    for _ in range(FRIENDS_COUNT):
        friend = crud.create_friend(db, owner_id, random_friend(rng, as_of))
        dates = interaction_dates(rng, history_start, as_of, recent_from=as_of - timedelta(days=7))
        interactions_created += log_interactions(db, owner_id, friend, dates, rng)
        friends_created += 1

    for _ in range(UPCOMING_BIRTHDAYS_COUNT):
        attrs = {**random_friend(rng, as_of), "birthday": upcoming_birthday(rng, as_of)}
        friend = crud.create_friend(db, owner_id, attrs)
        dates = interaction_dates(rng, history_start, as_of, recent_from=as_of - timedelta(days=7))
        interactions_created += log_interactions(db, owner_id, friend, dates, rng)
        friends_created += 1

    # history stops before the threshold so these stay overdue
    for _ in range(NEEDS_CONTACT_COUNT):
        friend = crud.create_friend(db, owner_id, random_friend(rng, as_of))
        dates = interaction_dates(rng, history_start, overdue_end)
        interactions_created += log_interactions(db, owner_id, friend, dates, rng)
        friends_created += 1

    logger.info(
        "Seeded %s friends and %s interactions for user %s",
        friends_created, interactions_created, owner_id,
    )
    return {"friends": friends_created, "interactions": interactions_created}


def main():
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    create_db_and_tables()
    db = SessionLocal()
    try:
        user = get_or_create_demo_user(db)
        seed_demo_data(db, user.id)
    finally:
        db.close()


if __name__ == "__main__":
    main()
