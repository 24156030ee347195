"""
Project submission model.

A submission is a student's robotics project proposal. Student and proposal
fields are written once by intake; the review side only ever touches the
status, comments, reviewer and version columns.
"""
from typing import Optional
from datetime import datetime
from sqlalchemy import String, Text, Boolean, Integer, ForeignKey, DateTime, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column
import enum
from labhub.models.base import BaseModel


class SubmissionStatus(str, enum.Enum):
    """Review status of a submission."""
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


# Decisions that must carry faculty comments
DECISION_STATUSES = (SubmissionStatus.APPROVED, SubmissionStatus.REJECTED)


class Branch(str, enum.Enum):
    CSE = "CSE"
    ECE = "ECE"
    MECHANICAL = "Mechanical"
    IT = "IT"
    OTHER = "Other"


class StudyYear(str, enum.Enum):
    FIRST = "1st"
    SECOND = "2nd"
    THIRD = "3rd"
    FOURTH = "4th"


class ProjectCategory(str, enum.Enum):
    AUTONOMOUS_ROBOTS = "Autonomous Robots"
    ROBOTIC_MANIPULATION = "Robotic Manipulation"
    HUMAN_ROBOT_INTERACTION = "Human-Robot Interaction"
    INDUSTRIAL_AUTOMATION = "Industrial Automation"
    BIO_INSPIRED = "Bio-Inspired Robotics"
    AERIAL_ROBOTICS = "Aerial Robotics"
    COMPUTER_VISION_AI = "Computer Vision & AI"
    OTHER = "Other"


class ProjectDuration(str, enum.Enum):
    ONE_TO_THREE = "1-3 months"
    THREE_TO_SIX = "3-6 months"
    SIX_TO_TWELVE = "6-12 months"
    TWELVE_PLUS = "12+ months"


OTHER_RESOURCE = "Other"

RESOURCE_CATALOG = (
    "Drone",
    "Robotic Dog",
    "Robotic Arm Kit",
    "Robotic Hands",
    "Arduino & Development Kits",
    "Jetson Nano AI Platform",
    "3D Printer",
    "Sensors & Actuators",
    "Workshop Space",
    OTHER_RESOURCE,
)


def _enum_column(enum_cls, name: str):
    return Enum(enum_cls, name=name, values_callable=lambda x: [e.value for e in x])


class Submission(BaseModel):
    """Project proposal record."""
    __tablename__ = "submissions"

    # Student
    student_name: Mapped[str] = mapped_column(String(200), nullable=False)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    roll_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    branch: Mapped[Branch] = mapped_column(_enum_column(Branch, "branch"), nullable=False)
    year: Mapped[StudyYear] = mapped_column(_enum_column(StudyYear, "studyyear"), nullable=False)
    contact_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Team
    is_team_project: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    team_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    team_members: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Proposal
    category: Mapped[ProjectCategory] = mapped_column(
        _enum_column(ProjectCategory, "projectcategory"),
        nullable=False
    )
    project_title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    expected_outcomes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[ProjectDuration] = mapped_column(
        _enum_column(ProjectDuration, "projectduration"),
        nullable=False
    )

    # Resources (list of catalog tags)
    required_resources: Mapped[list] = mapped_column(JSON, nullable=False)
    other_resources: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)

    # Review
    status: Mapped[SubmissionStatus] = mapped_column(
        _enum_column(SubmissionStatus, "submissionstatus"),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True
    )
    faculty_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(
        String(15),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<Submission {self.project_title} ({self.status.value})>"
