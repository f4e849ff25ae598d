"""Record and aggregate schemas served by the dashboard endpoints."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ProfileRecord(BaseModel):
    """Stored profile row."""

    id: UUID
    full_name: str | None = None
    username: str | None = None
    headline: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    github: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    avatar_url: str | None = None
    selected_template: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectRecord(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    image_url: str | None = None
    project_url: str | None = None
    github_url: str | None = None
    technologies: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def default_technologies(cls, v: list[str] | None) -> list[str]:
        """Stored rows may carry NULL instead of an empty list."""
        return v or []


class EducationRecord(BaseModel):
    id: UUID
    user_id: UUID
    institution: str
    degree: str
    field_of_study: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current_education: bool = False
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ExperienceRecord(BaseModel):
    id: UUID
    user_id: UUID
    company: str
    position: str
    location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current_job: bool = False
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BlogRecord(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    slug: str
    excerpt: str | None = None
    content: str
    published: bool = False
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DashboardAggregate(BaseModel):
    """
    Everything the dashboard pages render, loaded in one batch.

    Each field is filled independently; a failed sub-query leaves its field
    at the empty default instead of failing the whole aggregate.
    """

    projects: list[ProjectRecord] = Field(default_factory=list)
    education: list[EducationRecord] = Field(default_factory=list)
    experience: list[ExperienceRecord] = Field(default_factory=list)
    blogs: list[BlogRecord] = Field(default_factory=list)
    profile: ProfileRecord | None = None


class DashboardResponse(DashboardAggregate):
    """Dashboard aggregate plus the owner's public portfolio URL."""

    portfolio_url: str
