"""
Pydantic schemas for validating API input and shaping API output.
"""

from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field, constr, field_validator

from friends_crm.models import InteractionType

ItemT = TypeVar("ItemT")

KidName = constr(max_length=255)


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class FriendBase(BaseModel):
    """
    Fields shared by friend creation and output.
    """
    name: str = Field(max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    birthday: Optional[date] = None
    anniversary: Optional[date] = None
    partner: Optional[str] = Field(default=None, max_length=255)
    kids: Optional[List[KidName]] = None
    job_title: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    notes: Optional[str] = None
    last_contact_date: Optional[date] = None
    profile_picture: Optional[str] = Field(default=None, max_length=512)


class FriendCreate(FriendBase):
    """
    Schema for creating a friend. ``name`` must contain something besides whitespace.
    """

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _required_text(value)


class FriendUpdate(BaseModel):
    """
    Schema for updating a friend. Every field is optional; only the fields sent are changed.
    """
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    birthday: Optional[date] = None
    anniversary: Optional[date] = None
    partner: Optional[str] = Field(default=None, max_length=255)
    kids: Optional[List[KidName]] = None
    job_title: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    notes: Optional[str] = None
    last_contact_date: Optional[date] = None
    profile_picture: Optional[str] = Field(default=None, max_length=512)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("must not be empty")
        return _required_text(value)


class FriendSummary(BaseModel):
    """
    Short friend representation attached to interactions.
    """
    id: int
    name: str
    email: Optional[str] = None
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class FriendOut(FriendBase):
    """
    Friend as returned by the API, with id and timestamps.
    """
    email: Optional[str] = None
    id: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class InteractionBase(BaseModel):
    type: InteractionType
    description: str
    interaction_date: date


class InteractionCreate(InteractionBase):
    """
    Schema for logging an interaction. ``friend_id`` picks the friend it belongs to.
    """
    friend_id: int

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        return _required_text(value)


class InteractionOut(InteractionBase):
    id: int
    friend_id: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class InteractionWithFriend(InteractionOut):
    """
    Interaction together with a summary of its friend.
    """
    friend: FriendSummary


class FriendDetail(FriendOut):
    """
    Friend with its interactions, newest first.
    """
    interactions: List[InteractionOut] = []


class FriendOption(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class Page(BaseModel, Generic[ItemT]):
    """
    One page of an offset-paginated listing.

    Attributes:
        items: Items on this page.
        total: Number of items across all pages.
        page: Current page number, starting at 1.
        page_size: Maximum number of items per page.
        last_page: Number of the last page (1 when there are no items).
        from_item: 1-based position of the first item on this page, or None if the page is empty.
        to_item: 1-based position of the last item on this page, or None if the page is empty.
    """
    items: List[ItemT]
    total: int
    page: int
    page_size: int
    last_page: int
    from_item: Optional[int] = None
    to_item: Optional[int] = None


class DashboardStats(BaseModel):
    total_friends: int
    interactions_this_month: int
    upcoming_birthdays: int
    needs_contact: int


class DashboardOut(BaseModel):
    """
    Everything shown on the dashboard, computed against one ``as_of`` date.
    """
    as_of: date
    upcoming_birthdays: List[FriendOut]
    recent_friends: List[FriendOut]
    recent_interactions: List[InteractionWithFriend]
    needs_contact: List[FriendOut]
    stats: DashboardStats


class HealthOut(BaseModel):
    status: str
    timestamp: datetime


class UserBase(BaseModel):
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(min_length=6)


class UserOut(UserBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
