"""Profile model for the public portfolio header."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from folio.database import Base
from folio.models.columns import utcnow


class Profile(Base):
    """
    Portfolio profile, one per user.

    The primary key is the owning user's id, so a profile can be upserted
    without knowing whether it already exists.
    """

    __tablename__ = "profiles"

    id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    full_name = Column(Text)
    username = Column(String(30), unique=True)
    headline = Column(Text)
    bio = Column(Text)
    location = Column(Text)
    website = Column(Text)
    github = Column(Text)
    linkedin = Column(Text)
    twitter = Column(Text)
    avatar_url = Column(Text)
    selected_template = Column(String(32))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="profile")
