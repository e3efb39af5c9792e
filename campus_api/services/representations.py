"""Representations — ORM rows to camelCase JSON dicts.

Invariants:
    - password_hash and refresh_token_hash never appear in any output
    - Datetimes are ISO-8601 strings (None stays None)
    - Referenced users are embedded as a compact summary, never in full
"""

from datetime import datetime

from campus_api.models.ca_application import CAApplication
from campus_api.models.task import Task
from campus_api.models.task_submission import TaskSubmission
from campus_api.models.user import User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_summary(user: User | None, *fields: str) -> dict | None:
    """id plus the requested public fields (wire names)."""
    if user is None:
        return None
    full = public_user(user)
    summary = {"id": full["id"]}
    for name in fields:
        summary[name] = full[name]
    return summary


def public_user(user: User) -> dict:
    """Everything a user may see about an account."""
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "fullname": user.fullname,
        "role": user.role,
        "profilePicture": user.profile_picture,
        "score": user.score,
        "isIITPStud": user.is_iitp_student,
        "collegeName": user.college_name,
        "rollNo": user.roll_no,
        "address": user.address,
        "mobileNo": user.mobile_no,
        "PORs": list(user.pors or []),
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }


def dashboard_identity(user: User) -> dict:
    """The `user` block at the top of every dashboard."""
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "fullname": user.fullname,
        "role": user.role,
        "profilePicture": user.profile_picture,
        "score": user.score,
        "isIITPStud": user.is_iitp_student,
        "collegeName": user.college_name,
        "rollNo": user.roll_no,
        "PORs": list(user.pors or []),
    }


def application_dict(application: CAApplication, with_applicant: bool = False) -> dict:
    data = {
        "id": str(application.id),
        "userId": str(application.user_id),
        "applicationStatement": application.application_statement,
        "applicationDate": _iso(application.application_date),
        "status": application.status,
        "reviewedBy": str(application.reviewed_by) if application.reviewed_by else None,
        "reviewedAt": _iso(application.reviewed_at),
    }
    if with_applicant:
        data["applicant"] = user_summary(
            application.applicant, "fullname", "username", "collegeName",
        )
    return data


def task_dict(task: Task, with_assigner: bool = True) -> dict:
    data = {
        "id": str(task.id),
        "title": task.title,
        "description": task.description,
        "assignedBy": str(task.assigned_by),
        "assignedAt": _iso(task.assigned_at),
        "dueDate": _iso(task.due_date),
        "maxPoints": task.max_points,
    }
    if with_assigner:
        data["assigner"] = user_summary(task.assigner, "fullname", "username")
    return data


def submission_dict(submission: TaskSubmission) -> dict:
    return {
        "id": str(submission.id),
        "taskId": str(submission.task_id),
        "caId": str(submission.ca_id),
        "submittedAt": _iso(submission.submitted_at),
        "proofURLs": list(submission.proof_urls or []),
        "commentsCA": submission.comments_ca,
        "reviewedBy": str(submission.reviewed_by) if submission.reviewed_by else None,
        "reviewedAt": _iso(submission.reviewed_at),
        "reviewComments": submission.review_comments,
        "pointsAwarded": submission.points_awarded,
    }
