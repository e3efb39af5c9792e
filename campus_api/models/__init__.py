"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so SQLAlchemy resolves string-based
      relationship() references before any query runs
"""

from campus_api.models.user import User  # noqa: F401
from campus_api.models.ca_application import CAApplication  # noqa: F401
from campus_api.models.task import Task  # noqa: F401
from campus_api.models.task_submission import TaskSubmission  # noqa: F401
from campus_api.models.role_change import RoleChange  # noqa: F401
