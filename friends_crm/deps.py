"""
Module for shared FastAPI dependencies such as the database session.
"""

from friends_crm.database import SessionLocal


def get_db():
    """
    Dependency for obtaining a database session.

    Yields:
        Session: Database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
