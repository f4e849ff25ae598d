"""Blog post model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid

from folio.database import Base
from folio.models.columns import utcnow


class Blog(Base):
    """Blog post. Only published posts appear on the public portfolio."""

    __tablename__ = "blogs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    slug = Column(String(256), nullable=False)
    excerpt = Column(Text)
    content = Column(Text, nullable=False)
    published = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index("idx_blogs_user_created", user_id, created_at),
        Index("idx_blogs_user_slug", user_id, slug),
    )
