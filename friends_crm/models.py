"""
SQLAlchemy models for the Friends CRM: User, Friend and Interaction.
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from friends_crm.database import Base


class InteractionType(str, enum.Enum):
    call = "call"
    text = "text"
    email = "email"
    hangout = "hangout"
    meeting = "meeting"
    other = "other"


class User(Base):
    """
    Account that owns friends.

    Attributes:
        id (int): Unique user identifier.
        email (str): Login email, unique.
        hashed_password (str): Bcrypt hash of the password.
        created_at (datetime): Account creation time.
        updated_at (datetime): Time of the last account update.
        friends (relationship): Friends owned by this user.
    """
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    friends = relationship("Friend", back_populates="owner", cascade="all, delete-orphan")


class Friend(Base):
    """
    A person tracked by a user.

    Attributes:
        id (int): Unique friend identifier.
        user_id (int): Owning user (foreign key).
        name (str): Display name, required.
        email, phone, partner, job_title, company, address, notes (str): Optional details.
        birthday, anniversary (date): Optional dates; the birth year may be a placeholder.
        kids (list[str]): Names of the friend's children, stored as JSON.
        last_contact_date (date): Date of the most recently logged interaction.
        profile_picture (str): URL of the uploaded picture.
        interactions (relationship): Logged interactions, newest first.
    """
    __tablename__ = "friends"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    birthday = Column(Date, nullable=True)
    anniversary = Column(Date, nullable=True)
    partner = Column(String(255), nullable=True)
    kids = Column(JSON, nullable=True)
    job_title = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    last_contact_date = Column(Date, nullable=True)
    profile_picture = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="friends")
    interactions = relationship(
        "Interaction",
        back_populates="friend",
        cascade="all, delete-orphan",
        order_by=lambda: [Interaction.interaction_date.desc(), Interaction.id.desc()],
    )

    __table_args__ = (
        Index("ix_friends_user_id_name", "user_id", "name"),
        Index("ix_friends_user_id_birthday", "user_id", "birthday"),
        Index("ix_friends_user_id_last_contact_date", "user_id", "last_contact_date"),
        Index("ix_friends_user_id_created_at", "user_id", "created_at"),
    )


class Interaction(Base):
    """
    A contact event logged against a friend.

    Ownership is never stored here: it is always resolved through ``friend.user_id``.
    """
    __tablename__ = "interactions"
    id = Column(Integer, primary_key=True, index=True)
    friend_id = Column(Integer, ForeignKey("friends.id", ondelete="CASCADE"), nullable=False)
    type = Column(Enum(InteractionType, native_enum=False, length=20), nullable=False, index=True)
    description = Column(Text, nullable=False)
    interaction_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    friend = relationship("Friend", back_populates="interactions")

    __table_args__ = (
        Index("ix_interactions_friend_id_interaction_date", "friend_id", "interaction_date"),
    )
