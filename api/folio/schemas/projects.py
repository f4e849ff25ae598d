"""Project request schemas."""

from pydantic import BaseModel, field_validator

from folio.services.validation import parse_technologies


class CreateProjectRequest(BaseModel):
    """Request to add a project. ``technologies`` may be comma-separated text."""

    title: str
    description: str | None = None
    image_url: str | None = None
    project_url: str | None = None
    github_url: str | None = None
    technologies: list[str] | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def split_technologies(cls, v: str | list[str] | None) -> list[str]:
        return parse_technologies(v)


class UpdateProjectRequest(BaseModel):
    """Partial project update; only fields that are sent are changed."""

    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    project_url: str | None = None
    github_url: str | None = None
    technologies: list[str] | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def split_technologies(cls, v: str | list[str] | None) -> list[str]:
        return parse_technologies(v)
