"""
Submission status transition policies.

A policy maps each current status to the statuses it may move to. The
permissive policy allows any move and matches how faculty use the review
screen today; the strict policy only moves forward (with re-review allowed).
"""
from labhub.models.submission import SubmissionStatus

_ALL_STATUSES = list(SubmissionStatus)

PERMISSIVE_TRANSITIONS = {
    status: list(_ALL_STATUSES) for status in SubmissionStatus
}

STRICT_TRANSITIONS = {
    SubmissionStatus.PENDING: [
        SubmissionStatus.UNDER_REVIEW,
        SubmissionStatus.APPROVED,
        SubmissionStatus.REJECTED,
    ],
    SubmissionStatus.UNDER_REVIEW: [
        SubmissionStatus.PENDING,
        SubmissionStatus.APPROVED,
        SubmissionStatus.REJECTED,
    ],
    SubmissionStatus.APPROVED: [
        SubmissionStatus.UNDER_REVIEW,
        SubmissionStatus.COMPLETED,
    ],
    SubmissionStatus.REJECTED: [
        SubmissionStatus.UNDER_REVIEW,  # Can reopen
    ],
    SubmissionStatus.COMPLETED: [],  # Terminal state
}

TRANSITION_POLICIES = {
    "permissive": PERMISSIVE_TRANSITIONS,
    "strict": STRICT_TRANSITIONS,
}


def can_transition(
    policy: dict[SubmissionStatus, list[SubmissionStatus]],
    current: SubmissionStatus,
    requested: SubmissionStatus,
) -> bool:
    # Re-saving the same status (e.g. to edit comments) is always allowed
    if current == requested:
        return True
    return requested in policy.get(current, [])
