"""Public portfolio schemas."""

from pydantic import BaseModel, Field

from folio.schemas.dashboard import (
    BlogRecord,
    EducationRecord,
    ExperienceRecord,
    ProfileRecord,
    ProjectRecord,
)


class PublicPortfolio(BaseModel):
    """Read-only portfolio for a username. Blogs are published posts only."""

    profile: ProfileRecord
    projects: list[ProjectRecord] = Field(default_factory=list)
    education: list[EducationRecord] = Field(default_factory=list)
    experience: list[ExperienceRecord] = Field(default_factory=list)
    blogs: list[BlogRecord] = Field(default_factory=list)
    template: str


class TemplateInfo(BaseModel):
    id: str
    name: str


class ListTemplatesResponse(BaseModel):
    items: list[TemplateInfo]
