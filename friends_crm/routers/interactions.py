"""
Routes for logging and browsing interactions. Interactions cannot be edited.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from friends_crm import crud, deps, models, schemas
from friends_crm.auth import get_current_user

router = APIRouter(prefix="/interactions", tags=["Interactions"])


@router.get("", response_model=schemas.Page[schemas.InteractionWithFriend])
def list_interactions(
    page: int = Query(1, ge=1),
    page_size: int = Query(crud.INTERACTIONS_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Lists interactions with all of the current user's friends, latest first.

    Args:
        page (int): Page number, starting at 1.
        page_size (int): Interactions per page.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Returns:
        schemas.Page[schemas.InteractionWithFriend]: One page of interactions.
    """
    return crud.list_interactions(db, current_user.id, page=page, page_size=page_size)


@router.post("", response_model=schemas.InteractionWithFriend, status_code=status.HTTP_201_CREATED)
def create_interaction(
    interaction: schemas.InteractionCreate,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Logs an interaction and updates the friend's last contact date.

    Args:
        interaction (schemas.InteractionCreate): Friend, type, description and date.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Raises:
        NotFound: 404 if the friend does not exist.
        NotAuthorized: 403 if the friend belongs to another user.

    Returns:
        schemas.InteractionWithFriend: The logged interaction.
    """
    return crud.create_interaction(db, current_user.id, interaction.friend_id, interaction)


@router.get("/{interaction_id}", response_model=schemas.InteractionWithFriend)
def read_interaction(
    interaction_id: int,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    return crud.get_interaction(db, current_user.id, interaction_id)


@router.delete("/{interaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_interaction(
    interaction_id: int,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Deletes an interaction; the friend's last contact date is not recalculated."""
    crud.delete_interaction(db, current_user.id, interaction_id)
