"""CA Application Review Rules — pure state-machine checks for applications.

Invariants:
    - pending is the only state a review may start from
    - accepted and rejected are terminal
    - Only acceptance carries a role side effect (user -> ca)
    - Functions are PURE: they raise or return, the shell applies mutations
"""

from campus_api.core.domain_types import ApplicationStatus, Role
from campus_api.core.errors import ConflictError, RequestValidationFailed


ALLOWED_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED},
    ),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}


def normalize_statement(statement: str | None) -> str:
    """Trim the statement; blank statements are refused."""
    cleaned = (statement or "").strip()
    if not cleaned:
        raise RequestValidationFailed("Application statement is required")
    return cleaned


def check_transition(current: str, target: ApplicationStatus) -> None:
    """Raise ConflictError naming the current status when the move is illegal."""
    status = ApplicationStatus(current)
    if target not in ALLOWED_TRANSITIONS[status]:
        raise ConflictError(f"Application already {status.value}")


def role_after_review(target: ApplicationStatus, current_role: str) -> Role | None:
    """Role the applicant should hold after the review, or None for no change."""
    if target is ApplicationStatus.ACCEPTED and current_role != Role.CA.value:
        return Role.CA
    return None
