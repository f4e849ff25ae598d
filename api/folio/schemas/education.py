"""Education request schemas."""

from datetime import date

from pydantic import BaseModel


class CreateEducationRequest(BaseModel):
    institution: str
    degree: str
    field_of_study: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current_education: bool = False
    description: str | None = None


class UpdateEducationRequest(BaseModel):
    institution: str | None = None
    degree: str | None = None
    field_of_study: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    current_education: bool | None = None
    description: str | None = None
