"""Database module"""
from conference_tracker.db.base import Base
from conference_tracker.db.session import Database, ensure_created
from conference_tracker.db.tables import Presentation, Speaker, User

__all__ = ["Base", "Database", "ensure_created", "Presentation", "Speaker", "User"]
