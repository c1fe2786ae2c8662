"""
CRUD operations on users, friends and interactions.

Every friend and interaction operation takes the acting user's id explicitly
and checks ownership: a record owned by someone else raises
``NotAuthorized``, a missing one raises ``NotFound``.
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Query, Session, joinedload, selectinload

from friends_crm import models, schemas
from friends_crm.auth import get_password_hash, verify_password
from friends_crm.errors import NotAuthorized, NotFound, validate

logger = logging.getLogger(__name__)

FRIENDS_PAGE_SIZE = 12
INTERACTIONS_PAGE_SIZE = 20


def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    """Creates a user with a hashed password."""
    db_user = models.User(email=user.email, hashed_password=get_password_hash(user.password))
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def authenticate(db: Session, email: str, password: str) -> Optional[models.User]:
    """Returns the user if ``password`` matches, otherwise None."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def paginate(query: Query, page: int, page_size: int) -> schemas.Page:
    """
    Runs ``query`` for one page and wraps the result with page metadata.

    Args:
        query (Query): Already filtered and ordered query.
        page (int): 1-based page number.
        page_size (int): Maximum items per page.

    Returns:
        schemas.Page: Items plus total, last page and the item range shown.
    """
    page = max(page, 1)
    page_size = max(page_size, 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    last_page = max(math.ceil(total / page_size), 1)
    from_item = (page - 1) * page_size + 1 if items else None
    to_item = from_item + len(items) - 1 if items else None
    return schemas.Page(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        last_page=last_page,
        from_item=from_item,
        to_item=to_item,
    )


# --- Friends ---

def create_friend(
    db: Session,
    owner_id: int,
    friend: Union[schemas.FriendCreate, Mapping[str, Any]],
) -> models.Friend:
    """Validates ``friend`` and stores it for ``owner_id``."""
    friend = validate(schemas.FriendCreate, friend)
    db_friend = models.Friend(**friend.model_dump(), user_id=owner_id)
    db.add(db_friend)
    db.commit()
    db.refresh(db_friend)
    logger.info("Friend %s created for user %s", db_friend.id, owner_id)
    return db_friend


def get_friend(db: Session, owner_id: int, friend_id: int) -> models.Friend:
    """
    Loads a friend and checks that ``owner_id`` owns it.

    Raises:
        NotFound: If the friend does not exist.
        NotAuthorized: If the friend belongs to another user.
    """
    db_friend = db.get(models.Friend, friend_id)
    if db_friend is None:
        raise NotFound("Friend")
    if db_friend.user_id != owner_id:
        raise NotAuthorized()
    return db_friend


def update_friend(
    db: Session,
    owner_id: int,
    friend_id: int,
    friend: Union[schemas.FriendUpdate, Mapping[str, Any]],
) -> models.Friend:
    """Replaces the fields present in ``friend``; the others keep their values."""
    db_friend = get_friend(db, owner_id, friend_id)
    friend = validate(schemas.FriendUpdate, friend)
    for key, value in friend.model_dump(exclude_unset=True).items():
        setattr(db_friend, key, value)
    db.commit()
    db.refresh(db_friend)
    return db_friend


def set_profile_picture(db: Session, owner_id: int, friend_id: int, url: str) -> models.Friend:
    """Stores the reference to an already uploaded picture."""
    db_friend = get_friend(db, owner_id, friend_id)
    db_friend.profile_picture = url
    db.commit()
    db.refresh(db_friend)
    return db_friend


def delete_friend(db: Session, owner_id: int, friend_id: int) -> None:
    """Deletes a friend together with all of its interactions."""
    db_friend = get_friend(db, owner_id, friend_id)
    db.delete(db_friend)
    db.commit()
    logger.info("Friend %s deleted by user %s", friend_id, owner_id)


def friends_query(db: Session, owner_id: int) -> Query:
    """Owner's friends, newest first."""
    return db.query(models.Friend).filter(models.Friend.user_id == owner_id).order_by(
        models.Friend.created_at.desc(), models.Friend.id.desc()
    )


def list_friends(
    db: Session,
    owner_id: int,
    page: int = 1,
    page_size: int = FRIENDS_PAGE_SIZE,
    with_interactions: bool = True,
) -> schemas.Page:
    query = friends_query(db, owner_id)
    if with_interactions:
        query = query.options(selectinload(models.Friend.interactions))
    return paginate(query, page, page_size)


def count_friends(db: Session, owner_id: int) -> int:
    return db.query(models.Friend).filter(models.Friend.user_id == owner_id).count()


def friend_options(db: Session, owner_id: int) -> List[models.Friend]:
    """Friends of ``owner_id`` ordered by name, for picking one when logging an interaction."""
    return db.query(models.Friend).filter(models.Friend.user_id == owner_id).order_by(
        models.Friend.name, models.Friend.id
    ).all()


# --- Interactions ---

def create_interaction(
    db: Session,
    owner_id: int,
    friend_id: int,
    interaction: Union[schemas.InteractionCreate, Mapping[str, Any]],
) -> models.Interaction:
    """
    Logs an interaction and sets the friend's ``last_contact_date`` to its date.

    The contact date is overwritten even when the new interaction is older than
    ones already logged. Both writes are committed together; if either fails
    nothing is stored.

    Raises:
        NotFound: If the friend does not exist.
        NotAuthorized: If the friend belongs to another user.
        ValidationError: If type, description or date are invalid.
    """
    db_friend = get_friend(db, owner_id, friend_id)
    if isinstance(interaction, Mapping):
        interaction = {**interaction, "friend_id": friend_id}
    interaction = validate(schemas.InteractionCreate, interaction)

    db_interaction = models.Interaction(
        friend_id=db_friend.id,
        type=interaction.type,
        description=interaction.description,
        interaction_date=interaction.interaction_date,
    )
    try:
        db.add(db_interaction)
        db_friend.last_contact_date = interaction.interaction_date
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_interaction)
    logger.info("Interaction %s logged for friend %s", db_interaction.id, friend_id)
    return db_interaction


def get_interaction(db: Session, owner_id: int, interaction_id: int) -> models.Interaction:
    """
    Loads an interaction and checks that ``owner_id`` owns its friend.

    Raises:
        NotFound: If the interaction does not exist.
        NotAuthorized: If the friend belongs to another user.
    """
    db_interaction = db.get(models.Interaction, interaction_id)
    if db_interaction is None:
        raise NotFound("Interaction")
    if db_interaction.friend.user_id != owner_id:
        raise NotAuthorized()
    return db_interaction


def delete_interaction(db: Session, owner_id: int, interaction_id: int) -> None:
    """Deletes an interaction. The friend's ``last_contact_date`` is left as it is."""
    db_interaction = get_interaction(db, owner_id, interaction_id)
    db.delete(db_interaction)
    db.commit()
    logger.info("Interaction %s deleted by user %s", interaction_id, owner_id)


def interactions_query(db: Session, owner_id: int) -> Query:
    """Interactions across every friend of ``owner_id``, latest date first."""
    return (
        db.query(models.Interaction)
        .join(models.Friend, models.Interaction.friend_id == models.Friend.id)
        .filter(models.Friend.user_id == owner_id)
        .options(joinedload(models.Interaction.friend))
        .order_by(models.Interaction.interaction_date.desc(), models.Interaction.id.desc())
    )


def list_interactions(
    db: Session,
    owner_id: int,
    page: int = 1,
    page_size: int = INTERACTIONS_PAGE_SIZE,
) -> schemas.Page:
    return paginate(interactions_query(db, owner_id), page, page_size)
