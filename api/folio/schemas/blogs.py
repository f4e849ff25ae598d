"""Blog request schemas."""

from pydantic import BaseModel, field_validator


class CreateBlogRequest(BaseModel):
    """Request to create a blog post. The slug is derived from the title."""

    title: str
    content: str
    excerpt: str | None = None
    published: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title length."""
        if len(v) > 500:
            raise ValueError("Title must be 500 characters or less")
        return v


class UpdateBlogRequest(BaseModel):
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    published: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Validate title length."""
        if v is not None and len(v) > 500:
            raise ValueError("Title must be 500 characters or less")
        return v
