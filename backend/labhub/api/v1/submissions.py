"""
Project submission endpoints.

Endpoints:
- POST /api/v1/submissions - Submit a project proposal (public)
- GET /api/v1/submissions - List submissions
- GET /api/v1/submissions/{id} - Get submission
- POST /api/v1/submissions/{id}/review - Record a faculty decision

Permissions:
- Create: anyone
- List/Get/Review: reviewers (admins; faculty when enabled)
"""
from typing import Optional
from math import ceil
from fastapi import APIRouter, Depends, Query, status

from labhub.core.container import Services
from labhub.core.deps import get_current_profile, get_reviewer, get_services
from labhub.models.profile import Profile
from labhub.models.submission import Submission
from labhub.schemas.submission import (
    ReviewRequest,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionReceipt,
    SubmissionResponse,
)
from labhub.services.dashboard import SubmissionFilter

router = APIRouter()


def submission_to_response(s: Submission) -> SubmissionResponse:
    """Convert Submission model to response schema."""
    return SubmissionResponse(
        id=s.id,
        student_name=s.student_name,
        student_email=s.student_email,
        roll_number=s.roll_number,
        branch=s.branch.value,
        year=s.year.value,
        contact_number=s.contact_number,
        is_team_project=s.is_team_project,
        team_size=s.team_size,
        team_members=s.team_members,
        category=s.category.value,
        project_title=s.project_title,
        description=s.description,
        expected_outcomes=s.expected_outcomes,
        duration=s.duration.value,
        required_resources=list(s.required_resources or []),
        other_resources=s.other_resources,
        status=s.status.value,
        faculty_comments=s.faculty_comments,
        reviewed_by=s.reviewed_by,
        reviewed_at=s.reviewed_at,
        version=s.version,
        created=s.created,
        updated=s.updated,
    )


@router.post("", response_model=SubmissionReceipt, status_code=status.HTTP_201_CREATED)
async def create_submission(
    form: SubmissionCreate,
    services: Services = Depends(get_services),
):
    """Submit a project proposal."""
    submission = await services.intake.submit(form)
    return SubmissionReceipt(
        id=submission.id,
        status=submission.status.value,
        project_title=submission.project_title,
        created=submission.created,
    )


@router.get("", response_model=SubmissionListResponse)
async def list_submissions(
    page: int = Query(1, ge=1),
    perPage: int = Query(30, ge=1, le=100),
    status: Optional[str] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Search title, student name, roll number or email"),
    services: Services = Depends(get_services),
    reviewer: Profile = Depends(get_reviewer),
):
    """List submissions, newest first."""
    submissions = await services.dashboard.list_submissions(SubmissionFilter(status=status, search=search))

    total_items = len(submissions)
    start = (page - 1) * perPage
    items = [submission_to_response(s) for s in submissions[start:start + perPage]]
    return SubmissionListResponse(
        page=page,
        perPage=perPage,
        totalItems=total_items,
        totalPages=ceil(total_items / perPage) if total_items > 0 else 1,
        items=items
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: str,
    services: Services = Depends(get_services),
    reviewer: Profile = Depends(get_reviewer),
):
    """Get a submission by ID."""
    return submission_to_response(await services.dashboard.get_submission(submission_id))


@router.post("/{submission_id}/review", response_model=SubmissionResponse)
async def review_submission(
    submission_id: str,
    data: ReviewRequest,
    services: Services = Depends(get_services),
    profile: Profile = Depends(get_current_profile),
):
    """Set the submission's status, with faculty comments."""
    submission = await services.review.review(
        submission_id,
        data.status,
        data.comments,
        reviewer=profile,
        expected_version=data.expected_version,
    )
    return submission_to_response(submission)
