"""
Routes for managing the current user's friends.
"""

import logging
from datetime import date
from typing import List, Optional

from cloudinary.exceptions import Error as CloudinaryError
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from friends_crm import birthdays, crud, deps, models, schemas, storage
from friends_crm.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friends", tags=["Friends"])


@router.get("", response_model=schemas.Page[schemas.FriendDetail])
def list_friends(
    page: int = Query(1, ge=1),
    page_size: int = Query(crud.FRIENDS_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Lists the current user's friends, newest first, with their interactions.

    Args:
        page (int): Page number, starting at 1.
        page_size (int): Friends per page.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Returns:
        schemas.Page[schemas.FriendDetail]: One page of friends.
    """
    return crud.list_friends(db, current_user.id, page=page, page_size=page_size)


@router.post("", response_model=schemas.FriendOut, status_code=status.HTTP_201_CREATED)
def create_friend(
    friend: schemas.FriendCreate,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Adds a friend for the current user.

    Args:
        friend (schemas.FriendCreate): Friend details; only ``name`` is required.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Returns:
        schemas.FriendOut: The created friend.
    """
    return crud.create_friend(db, current_user.id, friend)


@router.get("/options", response_model=List[schemas.FriendOption])
def friend_options(
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Id and name of every friend, ordered by name."""
    return crud.friend_options(db, current_user.id)


@router.get("/upcoming_birthdays", response_model=List[schemas.FriendOut])
def upcoming_birthdays(
    days: int = Query(birthdays.DEFAULT_BIRTHDAY_WINDOW_DAYS, ge=0),
    as_of: Optional[date] = Query(None),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Friends whose birthday falls within the next ``days`` days.

    Args:
        days (int): Window size in days, today included.
        as_of (Optional[date]): Start of the window; defaults to today.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Returns:
        List[schemas.FriendOut]: Friends ordered by birthday month and day.
    """
    return birthdays.upcoming_birthdays(db, current_user.id, days=days, as_of=as_of)


@router.get("/needs_contact", response_model=List[schemas.FriendOut])
def needs_contact(
    threshold_days: int = Query(birthdays.DEFAULT_CONTACT_THRESHOLD_DAYS, ge=0),
    limit: int = Query(birthdays.DEFAULT_NEEDS_CONTACT_LIMIT, ge=1, le=100),
    as_of: Optional[date] = Query(None),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Friends not contacted for more than ``threshold_days`` days, never-contacted ones first."""
    return birthdays.needs_contact(db, current_user.id, threshold_days=threshold_days, as_of=as_of, limit=limit)


@router.get("/{friend_id}", response_model=schemas.FriendDetail)
def read_friend(
    friend_id: int,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Returns one friend with its interactions, newest first.

    Raises:
        NotFound: 404 if the friend does not exist.
        NotAuthorized: 403 if the friend belongs to another user.
    """
    return crud.get_friend(db, current_user.id, friend_id)


@router.put("/{friend_id}", response_model=schemas.FriendOut)
def update_friend(
    friend_id: int,
    friend: schemas.FriendUpdate,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Updates the fields sent in the body; omitted fields keep their values.

    Args:
        friend_id (int): Friend to update.
        friend (schemas.FriendUpdate): New values.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Raises:
        NotFound: 404 if the friend does not exist.
        NotAuthorized: 403 if the friend belongs to another user.

    Returns:
        schemas.FriendOut: The updated friend.
    """
    return crud.update_friend(db, current_user.id, friend_id, friend)


@router.patch("/{friend_id}/picture", response_model=schemas.FriendOut)
async def update_picture(
    friend_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Uploads a profile picture to Cloudinary and stores its URL on the friend.

    Args:
        friend_id (int): Friend whose picture is replaced.
        file (UploadFile): Image file.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Raises:
        NotFound: 404 if the friend does not exist.
        NotAuthorized: 403 if the friend belongs to another user.
        HTTPException: 500 if Cloudinary rejects the upload.

    Returns:
        schemas.FriendOut: The friend with its new picture URL.
    """
    crud.get_friend(db, current_user.id, friend_id)
    try:
        url = await run_in_threadpool(storage.upload_profile_picture, file.file, friend_id)
    except CloudinaryError as e:
        logger.error("Cloudinary upload failed for friend %s: %s", friend_id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cloudinary upload failed: {e}",
        )
    return crud.set_profile_picture(db, current_user.id, friend_id, url)


@router.delete("/{friend_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_friend(
    friend_id: int,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Deletes a friend and all of its interactions.

    Raises:
        NotFound: 404 if the friend does not exist.
        NotAuthorized: 403 if the friend belongs to another user.
    """
    crud.delete_friend(db, current_user.id, friend_id)
