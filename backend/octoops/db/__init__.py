"""Database package."""

from octoops.db.base import Base, BaseModel
from octoops.db.session import DBSession, get_db_session

__all__ = ["Base", "BaseModel", "DBSession", "get_db_session"]
