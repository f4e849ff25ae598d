"""Experience request schemas."""

from datetime import date

from pydantic import BaseModel


class CreateExperienceRequest(BaseModel):
    company: str
    position: str
    location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current_job: bool = False
    description: str | None = None


class UpdateExperienceRequest(BaseModel):
    company: str | None = None
    position: str | None = None
    location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current_job: bool | None = None
    description: str | None = None
