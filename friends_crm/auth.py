"""
Authentication helpers: password hashing, JWT access tokens and the
``get_current_user`` dependency, which caches users in Redis.
This module holds no FastAPI routes.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

import redis.asyncio as redis
from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from friends_crm import deps, models

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))
USER_CACHE_EXPIRE_MINUTES = int(os.getenv("USER_CACHE_EXPIRE_MINUTES", 60))


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


async def get_redis_client() -> redis.Redis:
    """
    Returns an asynchronous Redis client.

    Used as a FastAPI dependency so tests can swap it out.
    """
    redis_host = os.getenv("REDIS_HOST", "localhost")
    redis_port = int(os.getenv("REDIS_PORT", 6379))
    return redis.Redis(host=redis_host, port=redis_port, db=0, encoding="utf-8", decode_responses=True)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Checks a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hashes a password."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def user_cache_key(email: str) -> str:
    return f"user:{email}"


def serialize_user(user: models.User) -> str:
    """Dumps the non-sensitive user columns to JSON for the cache."""
    return json.dumps({
        "id": user.id,
        "email": user.email,
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    })


def deserialize_user(raw: str) -> models.User:
    user_dict = json.loads(raw)
    user = models.User(id=user_dict["id"], email=user_dict["email"])
    if user_dict.get("created_at"):
        user.created_at = datetime.fromisoformat(user_dict["created_at"])
    if user_dict.get("updated_at"):
        user.updated_at = datetime.fromisoformat(user_dict["updated_at"])
    return user


async def get_current_user(token: str = Depends(oauth2_scheme),
                           db: Session = Depends(deps.get_db),
                           r: redis.Redis = Depends(get_redis_client)) -> models.User:
    """
    FastAPI dependency returning the authenticated user.

    The user is looked up in Redis first and in the database on a cache miss.

    Args:
        token (str): JWT from the Authorization header.
        db (Session): Database session.
        r (redis.Redis): Redis client used as the user cache.

    Raises:
        HTTPException: 401 UNAUTHORIZED if the token is invalid or expired, or the user no longer exists.

    Returns:
        models.User: The current user. A cached user is detached from the session.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    cached_user = await r.get(user_cache_key(email))
    if cached_user:
        return deserialize_user(cached_user)

    user = db.query(models.User).filter(models.User.email == email).first()
    if user is None:
        raise credentials_exception

    await r.setex(user_cache_key(email), timedelta(minutes=USER_CACHE_EXPIRE_MINUTES), serialize_user(user))
    return user
