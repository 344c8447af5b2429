"""Complaint row: one reported issue and its resolution lifecycle."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from civicfix.models.base import Base, new_id, utcnow


class Complaint(Base):
    __tablename__ = "complaints"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=new_id)
    location: Mapped[str] = mapped_column(String(500))
    description: Mapped[str] = mapped_column(Text)
    contact: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending | assigned | completed
    assigned_to: Mapped[str | None] = mapped_column(String(200), nullable=True)
    before_image_url: Mapped[str] = mapped_column(String(1000))
    after_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
