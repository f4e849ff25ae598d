"""User model owned by the identity provider."""

import uuid

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from folio.database import Base
from folio.models.columns import utcnow


class User(Base):
    """Account that signs in to the dashboard."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    full_name = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_sign_in_at = Column(DateTime(timezone=True))

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
