"""Dashboard Aggregator — role-dispatched read models composed from several tables.

Invariants:
    - Exactly one DashboardView variant per role, chosen from DASHBOARD_VIEWS
    - Unknown roles fall back to the user view
    - Each view runs independent queries; any failure aborts the whole response
    - Activity feeds are sorted newest first and head-truncated:
      <= 10 entries for admin/moderator, <= 5 for CA/user
    - Metrics that are not computed yet are null and listed in stats.notComputed
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from campus_api.core.activity_feed import (
    ADMIN_FEED_LIMIT, CA_WELCOME_MESSAGE, MODERATOR_FEED_LIMIT,
    PERSONAL_FEED_LIMIT, USER_WELCOME_MESSAGE, Activity, feed_or_welcome,
    merge_activities,
)
from campus_api.core.domain_types import ActivityType, ApplicationStatus, Role
from campus_api.models.ca_application import CAApplication
from campus_api.models.task import Task
from campus_api.models.user import User
from campus_api.services.representations import (
    application_dict, dashboard_identity, task_dict, user_summary,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5
CA_ASSIGNED_TASKS_LIMIT = 10
REGISTRATION_WINDOW = timedelta(days=7)
NOT_SPECIFIED = "Not specified"
NOT_APPLIED = "not_applied"


class DashboardView(Protocol):
    """Builds the role-specific part of a dashboard for one caller."""
    async def build(self, db: AsyncSession, user: User) -> dict: ...


# ─── Query helpers ──────────────────────────────────────────────

async def _count(db: AsyncSession, model, *conditions) -> int:
    query = select(func.count()).select_from(model)
    if conditions:
        query = query.where(*conditions)
    return (await db.execute(query)).scalar_one()


async def _all(db: AsyncSession, query: Select) -> list:
    return list((await db.execute(query)).scalars().all())


def _recent_tasks_query(limit: int = RECENT_LIMIT) -> Select:
    return select(Task).order_by(Task.assigned_at.desc()).limit(limit)


def _assigner_name(task: Task) -> str:
    return task.assigner.fullname if task.assigner else "unknown"


# ─── Variants ───────────────────────────────────────────────────

class AdminDashboard:
    """Global counts, newest tasks and registrations, top scorers."""

    async def build(self, db: AsyncSession, user: User) -> dict:
        total_users = await _count(db, User)
        total_students = await _count(db, User, User.role == Role.USER.value)
        total_moderators = await _count(db, User, User.role == Role.MODERATOR.value)
        total_cas = await _count(db, User, User.role == Role.CA.value)
        iitp_students = await _count(db, User, User.is_iitp_student.is_(True))

        total_tasks = await _count(db, Task)
        recent_tasks = await _all(db, _recent_tasks_query())

        since = datetime.now(timezone.utc) - REGISTRATION_WINDOW
        recent_users = await _all(
            db,
            select(User)
            .where(User.created_at >= since)
            .order_by(User.created_at.desc())
            .limit(RECENT_LIMIT),
        )
        top_scorers = await _all(
            db,
            select(User)
            .where(User.role == Role.USER.value)
            .order_by(User.score.desc())
            .limit(RECENT_LIMIT),
        )

        pending = await _count(
            db, CAApplication, CAApplication.status == ApplicationStatus.PENDING.value,
        )
        accepted = await _count(
            db, CAApplication, CAApplication.status == ApplicationStatus.ACCEPTED.value,
        )
        rejected = await _count(
            db, CAApplication, CAApplication.status == ApplicationStatus.REJECTED.value,
        )

        registrations = [
            Activity(
                ActivityType.USER_REGISTRATION,
                f"{u.fullname} registered",
                u.created_at,
            )
            for u in recent_users
        ]
        assignments = [
            Activity(
                ActivityType.TASK_ASSIGNED,
                f'Task "{t.title}" assigned by {_assigner_name(t)}',
                t.assigned_at,
            )
            for t in recent_tasks
        ]

        return {
            "stats": {
                "totalUsers": total_users,
                "totalStudents": total_students,
                "totalModerators": total_moderators,
                "totalCAs": total_cas,
                "iitpStudents": iitp_students,
                "totalTasks": total_tasks,
                "pendingCAApplications": pending,
                "acceptedCAApplications": accepted,
                "rejectedCAApplications": rejected,
                "recentRegistrations": len(recent_users),
            },
            "recentActivities": merge_activities(
                registrations, assignments, limit=ADMIN_FEED_LIMIT,
            ),
            "topScorers": [
                user_summary(u, "username", "fullname", "score", "profilePicture")
                for u in top_scorers
            ],
            "recentTasks": [task_dict(t) for t in recent_tasks],
            "recentUsers": [
                user_summary(u, "username", "fullname", "role", "createdAt")
                for u in recent_users
            ],
        }


class ModeratorDashboard:
    """Review queue plus newest users and tasks."""

    async def build(self, db: AsyncSession, user: User) -> dict:
        total_students = await _count(db, User, User.role == Role.USER.value)
        iitp_students = await _count(db, User, User.is_iitp_student.is_(True))
        total_cas = await _count(db, User, User.role == Role.CA.value)

        total_tasks = await _count(db, Task)
        recent_tasks = await _all(db, _recent_tasks_query())

        pending_filter = CAApplication.status == ApplicationStatus.PENDING.value
        pending_total = await _count(db, CAApplication, pending_filter)
        review_queue = await _all(
            db,
            select(CAApplication)
            .where(pending_filter)
            .order_by(CAApplication.application_date.asc())
            .limit(RECENT_LIMIT),
        )

        recent_users = await _all(
            db,
            select(User)
            .where(User.role == Role.USER.value)
            .order_by(User.created_at.desc())
            .limit(RECENT_LIMIT),
        )

        user_events = [
            Activity(
                ActivityType.USER_ACTIVITY,
                f"{u.fullname} (Score: {u.score})",
                u.updated_at,
            )
            for u in recent_users
        ]
        task_events = [
            Activity(
                ActivityType.TASK_ACTIVITY,
                f'Task "{t.title}" assigned',
                t.assigned_at,
            )
            for t in recent_tasks
        ]

        return {
            "stats": {
                "totalUsers": total_students,
                "totalStudents": total_students,
                "totalCAs": total_cas,
                "iitpStudents": iitp_students,
                "totalTasks": total_tasks,
                "pendingCAApplications": pending_total,
                "managedUsers": total_students,
            },
            "recentActivities": merge_activities(
                user_events, task_events, limit=MODERATOR_FEED_LIMIT,
            ),
            "pendingCAApplications": [
                application_dict(a, with_applicant=True) for a in review_queue
            ],
            "recentUsers": [
                user_summary(u, "username", "fullname", "score", "createdAt")
                for u in recent_users
            ],
            "recentTasks": [task_dict(t) for t in recent_tasks],
        }


class CADashboard:
    """The ambassador's own tasks, score and application."""

    async def build(self, db: AsyncSession, user: User) -> dict:
        now = datetime.now(timezone.utc)
        own_tasks = Task.assigned_by == user.id

        total_assigned = await _count(db, Task, own_tasks)
        upcoming = await _count(
            db, Task, own_tasks, Task.due_date.is_not(None), Task.due_date > now,
        )
        assigned_tasks = await _all(
            db,
            select(Task)
            .where(own_tasks)
            .order_by(Task.assigned_at.desc())
            .limit(CA_ASSIGNED_TASKS_LIMIT),
        )
        application = (await db.execute(
            select(CAApplication).where(CAApplication.user_id == user.id),
        )).scalar_one_or_none()

        activities = [
            Activity(
                ActivityType.TASK_ASSIGNED,
                f'Assigned task: "{t.title}"',
                t.assigned_at,
            )
            for t in assigned_tasks
        ]

        ca_application = None
        if application is not None:
            ca_application = application_dict(application)
            ca_application["reviewer"] = user_summary(
                application.reviewer, "fullname", "username",
            )

        return {
            "stats": {
                "currentScore": user.score or 0,
                "totalTasksAssigned": total_assigned,
                "completedTasks": None,
                "upcomingTasks": upcoming,
                "applicationStatus": application.status if application else NOT_APPLIED,
                "responsibilities": list(user.pors or []),
                "collegeName": user.college_name or NOT_SPECIFIED,
                "rollNo": user.roll_no or NOT_SPECIFIED,
                "notComputed": ["completedTasks"],
            },
            "recentActivities": feed_or_welcome(
                activities, ActivityType.CA_WELCOME, CA_WELCOME_MESSAGE,
                limit=PERSONAL_FEED_LIMIT, now=now,
            ),
            "assignedTasks": [task_dict(t, with_assigner=False) for t in assigned_tasks],
            "caApplication": ca_application,
        }


class UserDashboard:
    """Score and a preview of the newest tasks."""

    async def build(self, db: AsyncSession, user: User) -> dict:
        available = await _count(db, Task)
        preview = await _all(db, _recent_tasks_query())

        activities = [
            Activity(
                ActivityType.TASK_AVAILABLE,
                f'New task available: "{t.title}"',
                t.assigned_at,
            )
            for t in preview
        ]

        return {
            "stats": {
                "currentScore": user.score or 0,
                "completedTasks": None,
                "availableTasks": available,
                "collegeName": user.college_name or NOT_SPECIFIED,
                "rollNo": user.roll_no or NOT_SPECIFIED,
                "rank": None,
                "notComputed": ["completedTasks", "rank"],
            },
            "recentActivities": feed_or_welcome(
                activities, ActivityType.WELCOME, USER_WELCOME_MESSAGE,
                limit=PERSONAL_FEED_LIMIT,
            ),
            "availableTasks": [task_dict(t) for t in preview],
        }


DASHBOARD_VIEWS: dict[Role, DashboardView] = {
    Role.ADMIN: AdminDashboard(),
    Role.MODERATOR: ModeratorDashboard(),
    Role.CA: CADashboard(),
    Role.USER: UserDashboard(),
}


def select_view(role: str) -> DashboardView:
    try:
        return DASHBOARD_VIEWS[Role(role)]
    except ValueError:
        logger.warning(f"Unknown role {role!r}, using the user dashboard")
        return DASHBOARD_VIEWS[Role.USER]


async def build_dashboard(db: AsyncSession, user: User) -> dict:
    """Identity block + the role's read model, feed serialized."""
    view = select_view(user.role)
    data = await view.build(db, user)
    data["recentActivities"] = [a.to_dict() for a in data["recentActivities"]]
    return {"user": dashboard_identity(user), **data}
