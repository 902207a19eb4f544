# tests/test_auth.py
from jose import jwt

from app.config.settings import settings
from app.core.auth import token_lifetime
from app.schemas.signup_request import initials_from_name

PASSWORD = "secret123"


async def test_signup_returns_token_and_user(client):
    response = await client.post(
        "/auth/signup",
        json={
            "username": "jroe",
            "password": PASSWORD,
            "role": "Student",
            "name": "Dr. Jane Roe",
            "specialty": "Neurology",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == settings.access_token_expire_minutes * 60
    assert body["user"]["username"] == "jroe"
    assert body["user"]["role"] == "Student"
    assert body["user"]["initials"] == "JR"
    assert "password_hash" not in body["user"]

    claims = jwt.decode(body["token"], settings.secret_key, algorithms=[settings.algorithm])
    assert claims["sub"] == str(body["user"]["id"])
    assert claims["role"] == "Student"


async def test_signup_duplicate_username(client, make_user):
    await make_user("taken")
    response = await client.post(
        "/auth/signup",
        json={"username": "taken", "password": PASSWORD, "role": "Doctor", "name": "Someone"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Username already exists"


async def test_signup_validation_errors_are_400(client):
    response = await client.post(
        "/auth/signup",
        json={"username": "x1y", "password": "123", "role": "Nurse", "name": "N"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert {"password", "role"} <= fields


async def test_login_and_remember_me(client, make_user):
    await make_user("drlogin")

    response = await client.post("/auth/login", json={"username": "drlogin", "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["expires_in"] == int(token_lifetime(False).total_seconds())

    response = await client.post(
        "/auth/login",
        json={"username": "drlogin", "password": PASSWORD, "rememberMe": True},
    )
    assert response.status_code == 200
    assert response.json()["expires_in"] == settings.remember_me_expire_days * 24 * 3600


async def test_login_wrong_password(client, make_user):
    await make_user("drwrong")
    response = await client.post("/auth/login", json={"username": "drwrong", "password": "nope!!"})
    assert response.status_code == 401
    response = await client.post("/auth/login", json={"username": "ghost", "password": PASSWORD})
    assert response.status_code == 401


async def test_protected_route_requires_bearer_token(client):
    response = await client.get("/users/current")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"

    response = await client.get("/users/current", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_current_user(client, make_user):
    user = await make_user("drcurrent", role="Patient")
    response = await client.get("/users/current", headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]
    assert response.json()["role"] == "Patient"


async def test_health_is_public(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_initials_from_name():
    assert initials_from_name("Dr. John Wilson") == "JW"
    assert initials_from_name("sarah adams") == "SA"
    assert initials_from_name("Plato") == "P"
