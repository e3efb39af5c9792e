"""Domain Types — enums shared across the codebase.

Invariants:
    - All valid states encoded as str Enums — no raw string matching in logic
    - ApplicationStatus transitions only pending -> accepted | rejected
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles — maps to the `users.role` column."""
    USER = "user"
    CA = "ca"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ApplicationStatus(str, Enum):
    """CA application lifecycle — pending is the only non-terminal state."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ActivityType(str, Enum):
    """Kinds of entries that appear in a dashboard activity feed."""
    USER_REGISTRATION = "user_registration"
    USER_ACTIVITY = "user_activity"
    TASK_ASSIGNED = "task_assigned"
    TASK_ACTIVITY = "task_activity"
    TASK_AVAILABLE = "task_available"
    CA_WELCOME = "ca_welcome"
    WELCOME = "welcome"


class TokenType(str, Enum):
    """JWT `type` claim values."""
    ACCESS = "access"
    REFRESH = "refresh"


REVIEWER_ROLES: tuple[Role, ...] = (Role.ADMIN, Role.MODERATOR)
TASK_ASSIGNER_ROLES: tuple[Role, ...] = (Role.ADMIN, Role.MODERATOR, Role.CA)
