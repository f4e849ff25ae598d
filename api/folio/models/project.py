"""Project model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, Uuid

from folio.database import Base
from folio.models.columns import StringList, utcnow


class Project(Base):
    """Portfolio project owned by a user."""

    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text)
    image_url = Column(Text)
    project_url = Column(Text)
    github_url = Column(Text)
    technologies = Column(StringList)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (Index("idx_projects_user_created", user_id, created_at),)
