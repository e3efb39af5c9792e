"""Tasks and Submissions — create, list, submit proof, review.

Invariants:
    - Only admin/moderator/ca create tasks; only a CA submits proof
    - Review adds pointsAwarded to the CA's score exactly once
    - pointsAwarded never exceeds the task's maxPoints
"""

from uuid import uuid4

import pytest


@pytest.fixture
async def ca(make_user):
    return await make_user(role="ca")


@pytest.fixture
async def moderator(make_user):
    return await make_user(role="moderator")


@pytest.fixture
async def task(client, auth, moderator):
    res = await client.post(
        "/api/v1/tasks",
        json={
            "title": "  Share the fest poster ",
            "description": "Post it in three college groups",
            "maxPoints": 50,
            "dueDate": "2030-01-15T12:00:00Z",
        },
        headers=auth(moderator),
    )
    assert res.status_code == 201
    return res.json()["task"]


@pytest.fixture
async def submission(client, auth, ca, task):
    res = await client.post(
        f"/api/v1/tasks/{task['id']}/submissions",
        json={
            "proofURLs": ["https://example.com/post/1"],
            "comments": " Done ",
        },
        headers=auth(ca),
    )
    assert res.status_code == 201
    return res.json()["submission"]


# ─── tasks ───────────────────────────────────────────────────────

async def test_create_task(task, moderator):
    assert task["title"] == "Share the fest poster"
    assert task["maxPoints"] == 50
    assert task["assignedBy"] == str(moderator.id)
    assert task["assigner"]["username"] == moderator.username


async def test_plain_user_cannot_create_task(client, auth, make_user):
    user = await make_user(role="user")
    res = await client.post(
        "/api/v1/tasks",
        json={"title": "x", "description": "y", "maxPoints": 5},
        headers=auth(user),
    )
    assert res.status_code == 403


async def test_task_needs_positive_points(client, auth, moderator):
    res = await client.post(
        "/api/v1/tasks",
        json={"title": "x", "description": "y", "maxPoints": 0},
        headers=auth(moderator),
    )
    assert res.status_code == 400


async def test_list_tasks(client, auth, make_user, task):
    user = await make_user(role="user")
    res = await client.get("/api/v1/tasks", headers=auth(user))
    assert res.status_code == 200
    body = res.json()
    assert [t["id"] for t in body["tasks"]] == [task["id"]]
    assert body["pagination"] == {"limit": 20, "offset": 0}


# ─── submissions ─────────────────────────────────────────────────

async def test_submit_proof(submission, ca, task):
    assert submission["taskId"] == task["id"]
    assert submission["caId"] == str(ca.id)
    assert submission["proofURLs"] == ["https://example.com/post/1"]
    assert submission["commentsCA"] == "Done"
    assert submission["pointsAwarded"] is None


async def test_submit_to_unknown_task(client, auth, ca):
    res = await client.post(
        f"/api/v1/tasks/{uuid4()}/submissions",
        json={"proofURLs": ["https://example.com/post/1"]},
        headers=auth(ca),
    )
    assert res.status_code == 404
    assert res.json()["msg"] == "Task not found"


async def test_submission_needs_proof(client, auth, ca, task):
    res = await client.post(
        f"/api/v1/tasks/{task['id']}/submissions",
        json={"proofURLs": []},
        headers=auth(ca),
    )
    assert res.status_code == 400


# ─── review ──────────────────────────────────────────────────────

async def test_review_awards_points(client, auth, moderator, ca, submission, test_db):
    res = await client.put(
        f"/api/v1/submissions/{submission['id']}/review",
        json={"pointsAwarded": 30, "reviewComments": "Nice reach"},
        headers=auth(moderator),
    )
    assert res.status_code == 200
    reviewed = res.json()["submission"]
    assert reviewed["pointsAwarded"] == 30
    assert reviewed["reviewedBy"] == str(moderator.id)
    assert reviewed["reviewedAt"] is not None

    await test_db.refresh(ca)
    assert ca.score == 30


async def test_second_review_is_rejected(client, auth, moderator, ca, submission, test_db):
    url = f"/api/v1/submissions/{submission['id']}/review"
    await client.put(url, json={"pointsAwarded": 30}, headers=auth(moderator))
    res = await client.put(url, json={"pointsAwarded": 10}, headers=auth(moderator))
    assert res.status_code == 400
    assert res.json()["msg"] == "Submission already reviewed"

    await test_db.refresh(ca)
    assert ca.score == 30


async def test_points_capped_by_task(client, auth, moderator, submission):
    res = await client.put(
        f"/api/v1/submissions/{submission['id']}/review",
        json={"pointsAwarded": 51},
        headers=auth(moderator),
    )
    assert res.status_code == 400
    assert res.json()["msg"] == "Points awarded cannot exceed 50"


async def test_ca_cannot_review(client, auth, ca, submission):
    res = await client.put(
        f"/api/v1/submissions/{submission['id']}/review",
        json={"pointsAwarded": 5},
        headers=auth(ca),
    )
    assert res.status_code == 403
