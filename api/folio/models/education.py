"""Education model."""

import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Text, Uuid

from folio.database import Base
from folio.models.columns import utcnow


class Education(Base):
    """
    Education entry.

    ``end_date`` is always NULL while ``current_education`` is set; the
    mutation layer enforces this on every write.
    """

    __tablename__ = "education"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    institution = Column(Text, nullable=False)
    degree = Column(Text, nullable=False)
    field_of_study = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)
    current_education = Column(Boolean, default=False, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (Index("idx_education_user_start", user_id, start_date),)
