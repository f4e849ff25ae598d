"""Pydantic schemas for request/response validation."""

from folio.schemas.auth import LoginRequest, RegisterRequest, SessionResponse
from folio.schemas.blogs import CreateBlogRequest, UpdateBlogRequest
from folio.schemas.dashboard import (
    BlogRecord,
    DashboardAggregate,
    DashboardResponse,
    EducationRecord,
    ExperienceRecord,
    ProfileRecord,
    ProjectRecord,
)
from folio.schemas.education import CreateEducationRequest, UpdateEducationRequest
from folio.schemas.experience import CreateExperienceRequest, UpdateExperienceRequest
from folio.schemas.portfolio import ListTemplatesResponse, PublicPortfolio, TemplateInfo
from folio.schemas.profile import UpdateProfileRequest, UsernameAvailabilityResponse
from folio.schemas.projects import CreateProjectRequest, UpdateProjectRequest

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "SessionResponse",
    "ProfileRecord",
    "ProjectRecord",
    "EducationRecord",
    "ExperienceRecord",
    "BlogRecord",
    "DashboardAggregate",
    "DashboardResponse",
    "CreateProjectRequest",
    "UpdateProjectRequest",
    "CreateEducationRequest",
    "UpdateEducationRequest",
    "CreateExperienceRequest",
    "UpdateExperienceRequest",
    "CreateBlogRequest",
    "UpdateBlogRequest",
    "UpdateProfileRequest",
    "UsernameAvailabilityResponse",
    "PublicPortfolio",
    "TemplateInfo",
    "ListTemplatesResponse",
]
