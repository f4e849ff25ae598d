"""Work experience model."""

import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Text, Uuid

from folio.database import Base
from folio.models.columns import utcnow


class Experience(Base):
    """Work experience entry. ``end_date`` is NULL while ``current_job`` is set."""

    __tablename__ = "experience"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    company = Column(Text, nullable=False)
    position = Column(Text, nullable=False)
    location = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)
    current_job = Column(Boolean, default=False, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (Index("idx_experience_user_start", user_id, start_date),)
