"""SQLAlchemy ORM models for the relational backend."""

from civicfix.models.base import Base, new_id, utcnow
from civicfix.models.complaint import Complaint

__all__ = ["Base", "Complaint", "new_id", "utcnow"]
