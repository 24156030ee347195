"""
Email templates for submission lifecycle events.

Each builder returns an ``OutboundEmail`` ready for the queue. Student and
reviewer text is HTML-escaped before it is placed in a body.
"""
from datetime import datetime
from html import escape
from typing import Optional

from labhub.models.base import utcnow
from labhub.models.submission import SubmissionStatus
from labhub.services.notifications import OutboundEmail

LAB_NAME = "JUIT Robotics Lab"

STATUS_COLORS = {
    SubmissionStatus.APPROVED: "#10b981",
    SubmissionStatus.REJECTED: "#ef4444",
    SubmissionStatus.UNDER_REVIEW: "#3b82f6",
    SubmissionStatus.COMPLETED: "#8b5cf6",
}
DEFAULT_STATUS_COLOR = "#6b7280"

BASE_STYLE = """
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
        .container { max-width: 600px; margin: 0 auto; padding: 20px; }
        .content { background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }
        .detail-box { background: white; padding: 20px; margin: 20px 0; border-left: 4px solid #3b82f6; border-radius: 5px; }
        .comments-box { background: #fef3c7; padding: 20px; margin: 20px 0; border-left: 4px solid #f59e0b; border-radius: 5px; }
        .button { background: #7c3aed; color: white !important; padding: 12px 30px; text-decoration: none; border-radius: 5px; display: inline-block; margin: 20px 0; }
        .footer { text-align: center; margin-top: 30px; color: #6b7280; font-size: 14px; }
"""


def status_title(status: SubmissionStatus) -> str:
    return status.value.replace("_", " ").upper()


def _page(header_color: str, heading: str, inner: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>{BASE_STYLE}
        .header {{ background: {header_color}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{heading}</h1>
        </div>
        <div class="content">
{inner}
        </div>
    </div>
</body>
</html>
"""


def project_confirmation(
    student_email: str,
    student_name: str,
    project_title: str,
    submission_id: str,
    submitted_at: Optional[datetime] = None,
) -> OutboundEmail:
    """Confirmation sent to the student right after intake."""
    submitted = (submitted_at or utcnow()).strftime("%B %d, %Y")
    inner = f"""
            <p>Dear <strong>{escape(student_name)}</strong>,</p>
            <p>Thank you for submitting your project proposal to the {LAB_NAME}! Your submission has been received and is now pending faculty review.</p>
            <div class="detail-box">
                <h2>Submission Details</h2>
                <p><strong>Project Title:</strong> {escape(project_title)}</p>
                <p><strong>Submission ID:</strong> {submission_id[:8]}</p>
                <p><strong>Status:</strong> Pending Review</p>
                <p><strong>Submitted:</strong> {submitted}</p>
            </div>
            <h3>What's Next?</h3>
            <p>Our faculty members will review your proposal within <strong>3-5 business days</strong>. You will receive an email notification once your project has been reviewed with feedback and next steps.</p>
            <div class="footer">
                <p>Best regards,<br><strong>{LAB_NAME} Team</strong></p>
                <p>This is an automated message. Please do not reply to this email.</p>
            </div>"""

    return OutboundEmail(
        to=student_email,
        to_name=student_name,
        subject=f"Project Submission Confirmed - {project_title}",
        html=_page("#1e40af", "Project Submitted Successfully!", inner),
        template_name="project_confirmation",
        template_data={
            "projectTitle": project_title,
            "studentName": student_name,
            "projectId": submission_id,
        },
    )


def status_update(
    student_email: str,
    student_name: str,
    project_title: str,
    status: SubmissionStatus,
    comments: Optional[str] = None,
) -> OutboundEmail:
    """Status change notice sent to the student after a review."""
    title = status_title(status)
    color = STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)

    comments_block = ""
    if comments:
        comments_block = f"""
            <div class="comments-box">
                <h3>Faculty Feedback</h3>
                <p>{escape(comments)}</p>
            </div>"""

    next_steps = ""
    if status == SubmissionStatus.APPROVED:
        next_steps = """
            <p><strong>Congratulations!</strong> Your project has been approved. You can now proceed with the implementation. Please coordinate with the lab in-charge for equipment allocation and lab access.</p>"""
    elif status == SubmissionStatus.UNDER_REVIEW:
        next_steps = """
            <p>Your project is currently being reviewed by our faculty. We will update you soon with the outcome.</p>"""

    inner = f"""
            <p>Dear <strong>{escape(student_name)}</strong>,</p>
            <p>We have an update regarding your project submission:</p>
            <p><strong>Project:</strong> {escape(project_title)}</p>
            <p><strong>Status: {title}</strong></p>{comments_block}{next_steps}
            <div class="footer">
                <p>Best regards,<br><strong>{LAB_NAME} Team</strong></p>
            </div>"""

    return OutboundEmail(
        to=student_email,
        to_name=student_name,
        subject=f"Project {title} - {project_title}",
        html=_page(color, "Project Status Update", inner),
        template_name="status_update",
        template_data={
            "projectTitle": project_title,
            "studentName": student_name,
            "status": status.value,
            "comments": comments,
        },
    )


def new_project_for_admin(
    admin_email: str,
    admin_name: str,
    project_title: str,
    student_name: str,
    category: str,
    site_url: str,
) -> OutboundEmail:
    """Heads-up to an admin that a new proposal is waiting."""
    dashboard_url = f"{site_url.rstrip('/')}/admin/dashboard"
    inner = f"""
            <p>Dear <strong>{escape(admin_name)}</strong>,</p>
            <p>A new project proposal has been submitted and requires your review:</p>
            <div class="detail-box">
                <h3>{escape(project_title)}</h3>
                <p><strong>Student:</strong> {escape(student_name)}</p>
                <p><strong>Category:</strong> {escape(category)}</p>
            </div>
            <p style="text-align: center;">
                <a href="{dashboard_url}" class="button">View in Dashboard</a>
            </p>
            <div class="footer">
                <p>{LAB_NAME} - Admin Notification System</p>
            </div>"""

    return OutboundEmail(
        to=admin_email,
        to_name=admin_name,
        subject=f"New Project: {project_title}",
        html=_page("#7c3aed", "New Project Submission", inner),
        template_name="new_project_admin",
        template_data={
            "projectTitle": project_title,
            "studentName": student_name,
            "category": category,
            "adminName": admin_name,
        },
    )
