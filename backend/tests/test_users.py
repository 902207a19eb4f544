# tests/test_users.py
from sqlalchemy import select, func

from app.db.models import (
    CommentModel,
    ConnectionModel,
    DocumentModel,
    LikeModel,
    PostModel,
    ProfileModel,
    StatModel,
    UserModel,
)


async def test_profile_merges_user_fields(client, make_user):
    user = await make_user(
        "profiled", name="Dr. Karen Park", title="Cardiologist", organization="Mayo Clinic"
    )
    response = await client.get("/users/profile", headers=user["headers"])
    assert response.status_code == 200
    profile = response.json()
    assert profile["user_id"] == user["id"]
    assert profile["name"] == "Dr. Karen Park"
    assert profile["initials"] == "KP"
    assert profile["organization"] == "Mayo Clinic"
    assert profile["profile_completion"] == 0
    assert profile["network_growth_days"] == 30


async def test_update_profile(client, make_user):
    user = await make_user("updater", role="Patient")
    response = await client.put(
        "/users/profile",
        json={"title": "Retired", "medicalHistory": "Asthma"},
        headers=user["headers"],
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Retired"
    assert response.json()["medical_history"] == "Asthma"
    assert response.json()["role"] == "Patient"

    response = await client.put("/users/profile", json={"role": "Doctor"}, headers=user["headers"])
    assert response.status_code == 400

    response = await client.get("/users/current", headers=user["headers"])
    assert response.json()["role"] == "Patient"
    assert response.json()["title"] == "Retired"


async def test_update_profile_rejects_null_for_required_fields(client, make_user):
    user = await make_user("nullable", title="Surgeon")
    for field in ("name", "title", "initials"):
        response = await client.put("/users/profile", json={field: None}, headers=user["headers"])
        assert response.status_code == 400, field
        assert response.json()["detail"] == "Validation failed"
        assert response.json()["errors"][0]["field"] == field

    # nullable columns may still be cleared
    response = await client.put("/users/profile", json={"education": None}, headers=user["headers"])
    assert response.status_code == 200

    response = await client.get("/users/current", headers=user["headers"])
    assert response.json()["title"] == "Surgeon"


async def test_profile_picture_upload(client, make_user, storage):
    user = await make_user("picture")
    response = await client.post(
        "/users/profile/picture",
        files={"profilePicture": ("me.PNG", b"\x89PNG\r\n\x1a\n", "image/png")},
        headers=user["headers"],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["profile_picture_url"].startswith("/uploads/")
    assert body["profile_picture_url"].endswith(".png")
    assert body["user"]["profile_picture_url"] == body["profile_picture_url"]
    assert storage.exists(body["profile_picture_url"].rsplit("/", 1)[1])

    response = await client.post(
        "/users/profile/picture",
        files={"profilePicture": ("script.sh", b"#!/bin/sh", "text/plain")},
        headers=user["headers"],
    )
    assert response.status_code == 400


async def test_directory_filters(client, make_user, connect):
    viewer = await make_user("dirviewer", specialty="Cardiology")
    neuro = await make_user("dirneuro", name="Dr. Jane Davis", specialty="Neurology", organization="Mass General")
    cardio = await make_user("dircardio", name="Dr. Karen Park", specialty="Cardiology", organization="Mayo Clinic")
    await connect(viewer, cardio)

    response = await client.get("/users/directory", headers=viewer["headers"])
    assert {u["id"] for u in response.json()} == {neuro["id"], cardio["id"]}

    response = await client.get("/users/directory", params={"specialtyFilter": "Neurology"}, headers=viewer["headers"])
    assert [u["id"] for u in response.json()] == [neuro["id"]]

    response = await client.get("/users/directory", params={"specialtyFilter": "all"}, headers=viewer["headers"])
    assert len(response.json()) == 2

    response = await client.get("/users/directory", params={"searchTerm": "mayo"}, headers=viewer["headers"])
    assert [u["id"] for u in response.json()] == [cardio["id"]]

    response = await client.get("/users/directory", params={"showConnected": "true"}, headers=viewer["headers"])
    assert [u["id"] for u in response.json()] == [cardio["id"]]


async def test_specialties_are_distinct_and_public(client, make_user):
    await make_user("spec1", specialty="Neurology")
    await make_user("spec2", specialty="Cardiology")
    await make_user("spec3", specialty="Neurology")
    await make_user("spec4")

    response = await client.get("/specialties")
    assert response.status_code == 200
    assert response.json() == ["Cardiology", "Neurology"]


async def test_list_users_is_doctor_only(client, make_user):
    doctor = await make_user("listdoctor")
    patient = await make_user("listpatient", role="Patient")

    response = await client.get("/users", headers=doctor["headers"])
    assert response.status_code == 200
    assert {u["id"] for u in response.json()} == {doctor["id"], patient["id"]}

    response = await client.get("/users", headers=patient["headers"])
    assert response.status_code == 403


async def test_list_users_is_not_truncated(client, make_user, session_factory):
    doctor = await make_user("bigdirectory")
    async with session_factory() as session:
        session.add_all(
            [
                UserModel(username=f"bulk{i}", password_hash="x", name=f"Bulk {i}", role="Patient")
                for i in range(1200)
            ]
        )
        await session.commit()

    response = await client.get("/users", headers=doctor["headers"])
    assert response.status_code == 200
    assert len(response.json()) == 1201


async def test_stats_for_current_user(client, make_user, session_factory):
    user = await make_user("statuser")
    other = await make_user("statother")
    async with session_factory() as session:
        session.add_all(
            [
                StatModel(user_id=user["id"], title="New Research Articles", value=24, icon="article",
                          icon_color="text-primary", change=12, timeframe="last week"),
                StatModel(user_id=other["id"], title="Network Connections", value=128, icon="people",
                          icon_color="text-secondary", change=8, timeframe="last month"),
            ]
        )
        await session.commit()

    response = await client.get("/stats", headers=user["headers"])
    assert response.status_code == 200
    assert [s["title"] for s in response.json()] == ["New Research Articles"]


async def test_delete_account_removes_owned_rows(client, make_user, connect, session_factory, storage):
    leaving = await make_user("leaving")
    staying = await make_user("staying")
    await connect(leaving, staying)

    response = await client.post("/posts", json={"title": "Bye", "content": "So long"}, headers=leaving["headers"])
    own_post = response.json()
    response = await client.post("/posts", json={"title": "Hi", "content": "Hello"}, headers=staying["headers"])
    other_post = response.json()

    await client.post(f"/posts/{other_post['id']}/like", headers=leaving["headers"])
    await client.post(f"/posts/{other_post['id']}/comments", json={"content": "nice"}, headers=leaving["headers"])
    await client.post(f"/posts/{own_post['id']}/comments", json={"content": "reply"}, headers=staying["headers"])
    await client.post(
        "/documents", files={"file": ("mine.pdf", b"%PDF", "application/pdf")}, headers=leaving["headers"]
    )
    assert len(list(storage.root.iterdir())) == 1

    response = await client.delete("/users/me", headers=leaving["headers"])
    assert response.status_code == 204

    async with session_factory() as session:
        uid = leaving["id"]
        assert await session.get(UserModel, uid) is None
        for model, column in (
            (PostModel, PostModel.author_id),
            (LikeModel, LikeModel.user_id),
            (CommentModel, CommentModel.user_id),
            (DocumentModel, DocumentModel.owner_id),
            (ProfileModel, ProfileModel.user_id),
        ):
            count = await session.scalar(select(func.count(model.id)).where(column == uid))
            assert count == 0, model.__name__
        connections = await session.scalar(
            select(func.count(ConnectionModel.id)).where(
                (ConnectionModel.user_id == uid) | (ConnectionModel.connected_user_id == uid)
            )
        )
        assert connections == 0
        # comments left by others on the deleted post go with the post
        assert await session.scalar(select(func.count(CommentModel.id))) == 0
        assert await session.get(PostModel, other_post["id"]) is not None

    assert list(storage.root.iterdir()) == []

    # the old token no longer resolves to a user
    response = await client.get("/users/current", headers=leaving["headers"])
    assert response.status_code == 401
    response = await client.get("/users/colleagues", headers=staying["headers"])
    assert response.json() == []
