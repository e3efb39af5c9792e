"""Account Maintenance — register, login, profile, change password, update profile.

Invariants:
    - No response ever carries password or refresh-token material
    - Wrong current password and same-as-current are both 400
    - The 4th change-password attempt in a window is 429
    - update-profile merges only the fields sent
"""

from campus_api.infrastructure.security import verify_password

from tests.services.accounts import DEFAULT_PASSWORD

NEW_PASSWORD = "Fresh456"


def _register_body(**overrides) -> dict:
    body = {
        "username": "Asha_K",
        "email": "Asha@Example.com",
        "fullname": "Asha Kumari",
        "password": "Secret123",
        "collegeName": "IIT Patna",
        "rollNo": "2101CS01",
        "PORs": ["Coding club lead"],
    }
    body.update(overrides)
    return body


# ─── register / login / refresh ──────────────────────────────────

async def test_register_creates_plain_user(client):
    res = await client.post("/api/v1/auth/register", json=_register_body(role="admin"))
    assert res.status_code == 201
    user = res.json()["user"]
    assert user["username"] == "asha_k"
    assert user["email"] == "asha@example.com"
    assert user["role"] == "user"
    assert user["score"] == 0
    assert "password" not in user
    assert "passwordHash" not in user


async def test_register_duplicate_email_rejected(client):
    await client.post("/api/v1/auth/register", json=_register_body())
    res = await client.post(
        "/api/v1/auth/register", json=_register_body(username="someone_else"),
    )
    assert res.status_code == 400
    assert res.json()["msg"] == "An account with this username or email already exists"


async def test_register_weak_password_rejected(client):
    res = await client.post(
        "/api/v1/auth/register", json=_register_body(password="password"),
    )
    assert res.status_code == 400
    assert "uppercase letter" in res.json()["msg"]


async def test_login_returns_tokens(client, make_user):
    user = await make_user(email="login@example.com")
    res = await client.post(
        "/api/v1/auth/login",
        json={"email": "LOGIN@example.com", "password": DEFAULT_PASSWORD},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["id"] == str(user.id)

    profile = await client.get(
        "/api/v1/profile",
        headers={"Authorization": f"Bearer {body['accessToken']}"},
    )
    assert profile.status_code == 200


async def test_login_wrong_password(client, make_user):
    await make_user(email="login@example.com")
    res = await client.post(
        "/api/v1/auth/login",
        json={"email": "login@example.com", "password": "Nope1234"},
    )
    assert res.status_code == 401
    assert res.json()["msg"] == "Invalid email or password"


async def test_refresh_rotates_tokens(client, make_user):
    await make_user(email="login@example.com")
    login = (await client.post(
        "/api/v1/auth/login",
        json={"email": "login@example.com", "password": DEFAULT_PASSWORD},
    )).json()

    res = await client.post(
        "/api/v1/auth/refresh", json={"refreshToken": login["refreshToken"]},
    )
    assert res.status_code == 200
    assert res.json()["accessToken"]


async def test_access_token_cannot_refresh(client, make_user):
    await make_user(email="login@example.com")
    login = (await client.post(
        "/api/v1/auth/login",
        json={"email": "login@example.com", "password": DEFAULT_PASSWORD},
    )).json()

    res = await client.post(
        "/api/v1/auth/refresh", json={"refreshToken": login["accessToken"]},
    )
    assert res.status_code == 401


# ─── profile ─────────────────────────────────────────────────────

async def test_profile_excludes_secrets(client, auth, make_user):
    user = await make_user(college_name="NIT Patna")
    res = await client.get("/api/v1/profile", headers=auth(user))
    assert res.status_code == 200
    profile = res.json()["user"]
    assert profile["collegeName"] == "NIT Patna"
    assert not {"password", "passwordHash", "refreshToken"} & set(profile)


# ─── change password ─────────────────────────────────────────────

async def test_change_password_success(client, auth, make_user, test_db):
    user = await make_user()
    res = await client.put(
        "/api/v1/change-password",
        json={
            "currentPassword": DEFAULT_PASSWORD,
            "newPassword": NEW_PASSWORD,
            "confirmPassword": NEW_PASSWORD,
        },
        headers=auth(user),
    )
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Password changed successfully"}

    await test_db.refresh(user)
    assert verify_password(NEW_PASSWORD, user.password_hash)
    assert user.refresh_token_hash is None


async def test_change_password_short_new_password(client, auth, make_user):
    user = await make_user()
    res = await client.put(
        "/api/v1/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "Ab1"},
        headers=auth(user),
    )
    assert res.status_code == 400
    assert "at least 6 characters" in res.json()["msg"]


async def test_change_password_wrong_current(client, auth, make_user, test_db):
    user = await make_user()
    res = await client.put(
        "/api/v1/change-password",
        json={"currentPassword": "Wrong1234", "newPassword": NEW_PASSWORD},
        headers=auth(user),
    )
    assert res.status_code == 400
    assert res.json()["msg"] == "Current password is incorrect"

    await test_db.refresh(user)
    assert verify_password(DEFAULT_PASSWORD, user.password_hash)


async def test_change_password_same_as_current(client, auth, make_user):
    user = await make_user()
    res = await client.put(
        "/api/v1/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": DEFAULT_PASSWORD},
        headers=auth(user),
    )
    assert res.status_code == 400
    assert res.json()["msg"] == "New password must be different from current password"


async def test_change_password_is_rate_limited(client, auth, make_user):
    user = await make_user()
    body = {"currentPassword": "Wrong1234", "newPassword": NEW_PASSWORD}
    statuses = []
    for _ in range(4):
        res = await client.put("/api/v1/change-password", json=body, headers=auth(user))
        statuses.append(res.status_code)

    assert statuses == [400, 400, 400, 429]
    assert res.json()["msg"] == (
        "Too many password change attempts, please try again later."
    )
    assert "Retry-After" in res.headers


# ─── update profile ──────────────────────────────────────────────

async def test_update_profile_merges_sent_fields(client, auth, make_user, test_db):
    user = await make_user(college_name="Old College", roll_no="OLD01")
    res = await client.put(
        "/api/v1/update-profile",
        json={"collegeName": "  IIT Patna  ", "PORs": ["Fest coordinator"]},
        headers=auth(user),
    )
    assert res.status_code == 200
    updated = res.json()["user"]
    assert updated["collegeName"] == "IIT Patna"
    assert updated["PORs"] == ["Fest coordinator"]
    assert updated["rollNo"] == "OLD01"
    assert updated["fullname"] == user.fullname


async def test_update_profile_rejects_bad_fullname(client, auth, make_user):
    user = await make_user()
    res = await client.put(
        "/api/v1/update-profile", json={"fullname": "R2 D2"}, headers=auth(user),
    )
    assert res.status_code == 400


async def test_update_profile_rejects_non_list_pors(client, auth, make_user):
    user = await make_user()
    res = await client.put(
        "/api/v1/update-profile", json={"PORs": "Lead"}, headers=auth(user),
    )
    assert res.status_code == 400
    assert res.json()["msg"] == "PORs must be an array"
