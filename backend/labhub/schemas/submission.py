"""
Pydantic schemas for project submissions.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from labhub.schemas.common import PaginatedResponse
from labhub.models.submission import (
    Branch,
    StudyYear,
    ProjectCategory,
    ProjectDuration,
    RESOURCE_CATALOG,
    OTHER_RESOURCE,
)

TITLE_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
EXPECTED_OUTCOMES_MAX_LENGTH = 500
OTHER_RESOURCES_MAX_LENGTH = 300
TEAM_SIZE_MIN = 1
TEAM_SIZE_MAX = 5


class SubmissionCreate(BaseModel):
    """Project proposal form submitted by a student."""
    # Student information
    student_name: str = Field(..., min_length=1, max_length=200)
    student_email: EmailStr
    roll_number: str = Field(..., min_length=1, max_length=50)
    branch: Branch
    year: StudyYear
    contact_number: Optional[str] = Field(None, max_length=30)

    # Team
    is_team_project: bool = False
    team_size: Optional[int] = Field(None, ge=TEAM_SIZE_MIN, le=TEAM_SIZE_MAX)
    team_members: Optional[str] = None

    # Proposal
    category: ProjectCategory
    project_title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH)
    expected_outcomes: Optional[str] = Field(None, max_length=EXPECTED_OUTCOMES_MAX_LENGTH)
    duration: ProjectDuration

    # Resources
    required_resources: list[str] = Field(..., min_length=1)
    other_resources: Optional[str] = Field(None, max_length=OTHER_RESOURCES_MAX_LENGTH)

    consent: bool

    @field_validator("student_name", "roll_number", "project_title")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required")
        return value

    @field_validator("required_resources")
    @classmethod
    def known_resources(cls, value: list[str]) -> list[str]:
        unknown = [r for r in value if r not in RESOURCE_CATALOG]
        if unknown:
            raise ValueError(f"Unknown resources: {', '.join(unknown)}")
        # Keep first occurrence order, drop duplicates
        return list(dict.fromkeys(value))

    @field_validator("consent")
    @classmethod
    def consent_given(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must agree to continue")
        return value

    @model_validator(mode="after")
    def clear_unused_fields(self) -> "SubmissionCreate":
        if not self.is_team_project:
            self.team_size = None
            self.team_members = None
        if OTHER_RESOURCE not in self.required_resources:
            self.other_resources = None
        return self


class SubmissionResponse(BaseModel):
    """Submission record."""
    id: str
    student_name: str
    student_email: str
    roll_number: str
    branch: str
    year: str
    contact_number: Optional[str] = None
    is_team_project: bool
    team_size: Optional[int] = None
    team_members: Optional[str] = None
    category: str
    project_title: str
    description: str
    expected_outcomes: Optional[str] = None
    duration: str
    required_resources: list[str]
    other_resources: Optional[str] = None
    status: str
    faculty_comments: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    version: int
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class SubmissionListResponse(PaginatedResponse[SubmissionResponse]):
    """Paginated list of submissions."""


class ReviewRequest(BaseModel):
    """Faculty decision on a submission."""
    status: str
    comments: Optional[str] = None
    expected_version: Optional[int] = None


class SubmissionReceipt(BaseModel):
    """What the public intake endpoint returns to the student."""
    id: str
    status: str
    project_title: str
    created: datetime
