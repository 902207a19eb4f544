# tests/test_connections.py


async def test_request_then_accept_makes_colleagues(client, make_user, connect):
    one = await make_user("one")
    two = await make_user("two", specialty="Cardiology")

    connection = await connect(one, two, accept=False)
    assert connection["status"] == "pending"
    assert connection["user_id"] == one["id"]
    assert connection["connected_user_id"] == two["id"]

    response = await client.get("/users/connection-requests", headers=two["headers"])
    assert [u["id"] for u in response.json()] == [one["id"]]

    response = await client.post(f"/connections/{connection['id']}/accept", headers=two["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    response = await client.get("/users/colleagues", headers=one["headers"])
    assert [c["id"] for c in response.json()] == [two["id"]]
    assert response.json()[0]["color_class"] == "bg-primary/20 text-primary"

    response = await client.get("/users/colleagues", headers=two["headers"])
    assert [c["id"] for c in response.json()] == [one["id"]]

    # no longer pending
    response = await client.get("/users/connection-requests", headers=two["headers"])
    assert response.json() == []


async def test_cannot_connect_with_yourself(client, make_user):
    me = await make_user("narcissus")
    response = await client.post(
        "/connections/connect", json={"userId": me["id"]}, headers=me["headers"]
    )
    assert response.status_code == 400

    response = await client.get("/users/colleagues", headers=me["headers"])
    assert response.json() == []


async def test_connect_to_unknown_user(client, make_user):
    me = await make_user("lonely")
    response = await client.post(
        "/connections/connect", json={"userId": 9999}, headers=me["headers"]
    )
    assert response.status_code == 404


async def test_connect_requires_user_id(client, make_user):
    me = await make_user("forgetful")
    response = await client.post("/connections/connect", json={}, headers=me["headers"])
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "userId"


async def test_duplicate_request_conflicts_in_both_directions(client, make_user, connect):
    a = await make_user("dupa")
    b = await make_user("dupb")
    await connect(a, b, accept=False)

    response = await client.post("/connections/connect", json={"userId": b["id"]}, headers=a["headers"])
    assert response.status_code == 409
    response = await client.post("/connections/connect", json={"userId": a["id"]}, headers=b["headers"])
    assert response.status_code == 409


async def test_rejected_request_can_be_sent_again(client, make_user, connect):
    a = await make_user("retrya")
    b = await make_user("retryb")
    connection = await connect(a, b, accept=False)

    response = await client.post(f"/connections/{connection['id']}/reject", headers=b["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"

    response = await client.post("/connections/connect", json={"userId": b["id"]}, headers=a["headers"])
    assert response.status_code == 201


async def test_only_recipient_may_accept(client, make_user, connect):
    a = await make_user("senda")
    b = await make_user("sendb")
    outsider = await make_user("outsider")
    connection = await connect(a, b, accept=False)

    for user in (a, outsider):
        response = await client.post(f"/connections/{connection['id']}/accept", headers=user["headers"])
        assert response.status_code == 403

    response = await client.post(f"/connections/{connection['id']}/reject", headers=outsider["headers"])
    assert response.status_code == 403


async def test_initiator_may_withdraw_pending_request(client, make_user, connect):
    a = await make_user("withdrawa")
    b = await make_user("withdrawb")
    connection = await connect(a, b, accept=False)

    response = await client.post(f"/connections/{connection['id']}/reject", headers=a["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"


async def test_status_changes_only_from_pending(client, make_user, connect):
    a = await make_user("statea")
    b = await make_user("stateb")
    connection = await connect(a, b)

    response = await client.post(f"/connections/{connection['id']}/accept", headers=b["headers"])
    assert response.status_code == 400
    response = await client.post(f"/connections/{connection['id']}/reject", headers=b["headers"])
    assert response.status_code == 400
    # the initiator cannot withdraw once accepted either
    response = await client.post(f"/connections/{connection['id']}/reject", headers=a["headers"])
    assert response.status_code == 403

    response = await client.post("/connections/999/accept", headers=b["headers"])
    assert response.status_code == 404


async def test_list_connections_with_status_filter(client, make_user, connect):
    a = await make_user("lista")
    b = await make_user("listb")
    c = await make_user("listc")
    await connect(a, b)
    await connect(c, a, accept=False)

    response = await client.get("/connections", headers=a["headers"])
    assert len(response.json()) == 2

    response = await client.get("/connections", params={"status": "accepted"}, headers=a["headers"])
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["connected_user"]["id"] == b["id"]
    assert rows[0]["user"]["username"] == "lista"

    response = await client.get("/connections", params={"status": "pending"}, headers=a["headers"])
    assert [r["user_id"] for r in response.json()] == [c["id"]]

    response = await client.get("/connections", params={"status": "bogus"}, headers=a["headers"])
    assert response.status_code == 400


async def test_mutual_connections_are_symmetric(client, make_user, connect):
    a = await make_user("mutuala")
    b = await make_user("mutualb")
    c = await make_user("mutualc")
    d = await make_user("mutuald")
    await connect(a, c)
    await connect(c, b)
    await connect(a, d)
    # pending rows do not count
    await connect(d, b, accept=False)

    ab = await client.get(f"/users/{a['id']}/mutual-connections/{b['id']}", headers=a["headers"])
    ba = await client.get(f"/users/{b['id']}/mutual-connections/{a['id']}", headers=a["headers"])
    assert ab.status_code == 200
    assert [u["id"] for u in ab.json()] == [c["id"]]
    assert ab.json() == ba.json()


async def test_suggestions_exclude_any_existing_row(client, make_user, connect):
    me = await make_user("viewer")
    friend = await make_user("friend")
    pending = await make_user("pending")
    rejected = await make_user("rejected")
    stranger = await make_user("stranger", specialty="Neurology", organization="Mass General")
    friend_of_friend = await make_user("fof")

    await connect(me, friend)
    await connect(me, pending, accept=False)
    row = await connect(rejected, me, accept=False)
    await client.post(f"/connections/{row['id']}/reject", headers=me["headers"])
    await connect(friend, friend_of_friend)

    response = await client.get("/users/suggestions", headers=me["headers"])
    assert response.status_code == 200
    suggestions = {s["id"]: s for s in response.json()}
    assert set(suggestions) == {stranger["id"], friend_of_friend["id"]}
    assert suggestions[friend_of_friend["id"]]["mutual_connections"] == 1
    assert suggestions[stranger["id"]]["mutual_connections"] == 0
    assert suggestions[stranger["id"]]["organization"] == "Mass General"
    assert suggestions[stranger["id"]]["color_class"] == "bg-secondary/20 text-secondary"


async def test_student_requests_dashboard(client, make_user, connect):
    doctor = await make_user("dashdoc")
    student = await make_user("dashstudent", role="Student")
    other_doctor = await make_user("dashdoc2")
    await connect(student, doctor, accept=False)
    await connect(other_doctor, doctor, accept=False)

    response = await client.get("/dashboard/doctor/student-connection-requests", headers=doctor["headers"])
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["user"]["id"] == student["id"]
    assert rows[0]["status"] == "pending"

    response = await client.get("/dashboard/doctor/student-connection-requests", headers=student["headers"])
    assert response.status_code == 403
