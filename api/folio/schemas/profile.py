"""Profile request and response schemas."""

from pydantic import BaseModel

from folio.services.username import UsernameStatus


class UpdateProfileRequest(BaseModel):
    """Partial profile update; the profile is created if it does not exist."""

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


class UsernameAvailabilityResponse(BaseModel):
    username: str
    status: UsernameStatus
    available: bool
    message: str | None = None
