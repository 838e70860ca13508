from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base


class Feedback(Base):
    """
    A user-submitted suggestion. ``type`` is fixed at creation and selects the
    status workflow (see ``workflow.py``).
    """

    __tablename__ = "feedback"
    __table_args__ = (
        Index("idx_feedback_created_at", "created_at"),
        Index("idx_feedback_type_status", "type", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    type: Mapped[str] = mapped_column(String(32), nullable=False)  # bug_report, feature_request, general_feedback
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="medium")  # low, medium, high

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Submitter
    user_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    user_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_role: Mapped[str | None] = mapped_column(String(64), nullable=True)
    business_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    business_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    screenshot_urls: Mapped[list | None] = mapped_column(JSON, nullable=True)
    # Browser/device/network details captured at submission. Informational only.
    system_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
