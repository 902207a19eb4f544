# tests/test_documents.py
import pytest
from fastapi import HTTPException

from app.db.crud.document import document_type_for


async def _upload(client, user, filename="report.pdf", content=b"%PDF-1.4 test"):
    response = await client.post(
        "/documents",
        files={"file": (filename, content, "application/octet-stream")},
        headers=user["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_upload_stores_file_and_type(client, make_user, storage):
    doctor = await make_user("uploaddoc")
    document = await _upload(client, doctor, "Quarterly Data.XLSX")
    assert document["filename"] == "Quarterly Data.XLSX"
    assert document["file_type"] == "Excel"
    assert document["owner_id"] == doctor["id"]
    assert len(list(storage.root.iterdir())) == 1


async def test_only_doctors_upload(client, make_user):
    student = await make_user("uploadstudent", role="Student")
    response = await client.post(
        "/documents",
        files={"file": ("notes.pdf", b"data", "application/pdf")},
        headers=student["headers"],
    )
    assert response.status_code == 403


async def test_listing_filters(client, make_user):
    owner = await make_user("listowner")
    colleague = await make_user("listcolleague")
    pdf = await _upload(client, owner, "case.pdf")
    deck = await _upload(client, owner, "talk.pptx")

    response = await client.get("/documents", params={"filter": "shared-by-me"}, headers=owner["headers"])
    assert [d["id"] for d in response.json()] == [deck["id"], pdf["id"]]

    response = await client.get("/documents", params={"filter": "shared-with-me"}, headers=colleague["headers"])
    assert response.json() == []

    await client.post(
        f"/documents/{pdf['id']}/share", json={"userIds": [colleague["id"]]}, headers=owner["headers"]
    )
    response = await client.get("/documents", params={"filter": "shared-with-me"}, headers=colleague["headers"])
    shared = response.json()
    assert [d["id"] for d in shared] == [pdf["id"]]
    assert shared[0]["icon"] == "description"
    assert shared[0]["type_label"] == {"name": "PDF", "color": "primary"}
    assert [u["id"] for u in shared[0]["shared_with"]] == [colleague["id"]]

    response = await client.get("/documents", params={"filter": "PPT"}, headers=colleague["headers"])
    assert [d["id"] for d in response.json()] == [deck["id"]]
    assert response.json()[0]["type_label"] == {"name": "PPT", "color": "blue-500"}

    response = await client.get("/documents", params={"searchTerm": "CASE"}, headers=colleague["headers"])
    assert [d["id"] for d in response.json()] == [pdf["id"]]


async def test_share_rules(client, make_user):
    owner = await make_user("shareowner")
    friend = await make_user("sharefriend")
    document = await _upload(client, owner)
    url = f"/documents/{document['id']}/share"

    response = await client.post(url, json={"userIds": [friend["id"], owner["id"]]}, headers=owner["headers"])
    assert response.status_code == 200
    assert response.json() == {"success": True, "shared_with": [friend["id"]]}

    # sharing again adds nothing
    response = await client.post(url, json={"userIds": [friend["id"]]}, headers=owner["headers"])
    assert response.json()["shared_with"] == []

    response = await client.post(url, json={"userIds": [owner["id"]]}, headers=friend["headers"])
    assert response.status_code == 403

    response = await client.post(url, json={"userIds": [4242]}, headers=owner["headers"])
    assert response.status_code == 404

    response = await client.post(url, json={"userIds": []}, headers=owner["headers"])
    assert response.status_code == 400

    response = await client.post("/documents/999/share", json={"userIds": [friend["id"]]}, headers=owner["headers"])
    assert response.status_code == 404


async def test_download_access(client, make_user):
    owner = await make_user("dlowner")
    friend = await make_user("dlfriend")
    stranger = await make_user("dlstranger", role="Patient")
    content = b"%PDF-1.4 private case notes"
    document = await _upload(client, owner, "case notes.pdf", content)
    url = f"/documents/{document['id']}/download"

    response = await client.get(url, headers=owner["headers"])
    assert response.status_code == 200
    assert response.content == content
    assert "case" in response.headers["content-disposition"]

    response = await client.get(url, headers=stranger["headers"])
    assert response.status_code == 403

    await client.post(
        f"/documents/{document['id']}/share", json={"userIds": [friend["id"]]}, headers=owner["headers"]
    )
    response = await client.get(url, headers=friend["headers"])
    assert response.status_code == 200
    assert response.content == content

    response = await client.get("/documents/31337/download", headers=owner["headers"])
    assert response.status_code == 404


async def test_recent_documents_are_capped(client, make_user):
    doctor = await make_user("recentdoc")
    uploaded = [await _upload(client, doctor, f"file{i}.pdf") for i in range(4)]

    response = await client.get("/documents/recent", headers=doctor["headers"])
    assert response.status_code == 200
    assert [d["id"] for d in response.json()] == [d["id"] for d in reversed(uploaded)][:3]


def test_document_type_for():
    assert document_type_for("a.PDF") == "PDF"
    assert document_type_for("b.docx") == "Word"
    assert document_type_for("c.ppt") == "PPT"
    assert document_type_for("archive.zip") == "Unknown"
    assert document_type_for("README") == "Unknown"


async def test_storage_refuses_paths_outside_root(storage):
    with pytest.raises(HTTPException) as exc:
        storage.path_for("../../etc/passwd")
    assert exc.value.status_code == 404
