"""
Dashboard route.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from friends_crm import dashboard, deps, models, schemas
from friends_crm.auth import get_current_user

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=schemas.DashboardOut)
def read_dashboard(
    as_of: Optional[date] = Query(None),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Returns the dashboard summary for the current user.

    Args:
        as_of (Optional[date]): Reference date; defaults to today.
        db (Session): Database session.
        current_user (models.User): Authenticated user.

    Returns:
        schemas.DashboardOut: Birthdays, recent activity, overdue contacts and stats.
    """
    return dashboard.build_dashboard(db, current_user.id, as_of=as_of)
