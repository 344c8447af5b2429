"""Complaint repository interface shared by the relational and edge backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from civicfix.schemas.complaint import ComplaintRead


class ComplaintRepository(ABC):
    """Durable record store for complaints.

    Both realizations honor the same contracts: ``insert`` assigns the id and
    stamps ``status=pending``/``submitted_at``, ``list_all`` is ordered by id
    descending, and ``get``/``update_fields``/``delete`` raise NotFoundError
    for unknown ids.
    """

    @abstractmethod
    async def insert(self, fields: dict[str, Any]) -> ComplaintRead:
        ...

    @abstractmethod
    async def list_all(self) -> list[ComplaintRead]:
        ...

    @abstractmethod
    async def get(self, complaint_id: str) -> ComplaintRead:
        ...

    @abstractmethod
    async def update_fields(self, complaint_id: str, fields: dict[str, Any]) -> ComplaintRead:
        """Apply only the supplied fields. Empty maps raise EmptyUpdateError before any I/O."""
        ...

    @abstractmethod
    async def delete(self, complaint_id: str) -> ComplaintRead:
        """Remove the row and return its prior snapshot."""
        ...

    @abstractmethod
    async def create_schema(self) -> None:
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Round-trip to the backend; raises RepositoryError when unreachable."""
        ...
