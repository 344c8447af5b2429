"""Complaint repositories: relational (SQLAlchemy) and edge (HTTP SQL)."""

from civicfix.repositories.base import ComplaintRepository
from civicfix.repositories.edge import EdgeComplaintRepository, EdgeSqlClient
from civicfix.repositories.sql import SqlComplaintRepository

__all__ = [
    "ComplaintRepository",
    "EdgeComplaintRepository", "EdgeSqlClient",
    "SqlComplaintRepository",
]
