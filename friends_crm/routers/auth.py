"""
Routes for registering, logging in and reading the current user.
"""

from datetime import timedelta

import redis.asyncio as redis
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from friends_crm import crud, deps, models, schemas
from friends_crm.auth import (
    ACCESS_TOKEN_EXPIRE_MINUTES, USER_CACHE_EXPIRE_MINUTES, create_access_token,
    get_current_user, get_redis_client, serialize_user, user_cache_key,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
def signup(body: schemas.UserCreate, db: Session = Depends(deps.get_db)):
    """
    Registers a new user.

    Args:
        body (schemas.UserCreate): Email and password.
        db (Session): Database session.

    Raises:
        HTTPException: 409 CONFLICT if the email is already registered.

    Returns:
        schemas.UserOut: The created user.
    """
    if crud.get_user_by_email(db, body.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Account already exists")
    return crud.create_user(db, body)


@router.post("/login", response_model=schemas.Token)
async def login(body: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(deps.get_db),
                r: redis.Redis = Depends(get_redis_client)):
    """
    Authenticates a user and returns a bearer token.

    Args:
        body (OAuth2PasswordRequestForm): ``username`` holds the email.
        db (Session): Database session.
        r (redis.Redis): Redis client; the user is cached on successful login.

    Raises:
        HTTPException: 401 UNAUTHORIZED if the credentials are wrong.

    Returns:
        schemas.Token: Access token and its type.
    """
    user = crud.authenticate(db, body.username, body.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")

    access_token = create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    await r.setex(user_cache_key(user.email), timedelta(minutes=USER_CACHE_EXPIRE_MINUTES), serialize_user(user))
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/current_user", response_model=schemas.UserOut)
async def read_users_me(current_user: models.User = Depends(get_current_user)):
    """Returns the authenticated user."""
    return current_user
