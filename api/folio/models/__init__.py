"""Database models for the portfolio builder."""

from folio.models.blog import Blog
from folio.models.education import Education
from folio.models.experience import Experience
from folio.models.profile import Profile
from folio.models.project import Project
from folio.models.user import User

__all__ = [
    "User",
    "Profile",
    "Project",
    "Education",
    "Experience",
    "Blog",
]
