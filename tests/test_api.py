import pytest

from helpers import PHONE_A, PHONE_B, auth_headers


def _register_phone(client, user_id, phone, name, token=None):
    body = {"phoneNumber": phone, "displayName": name}
    if token:
        body["fcmToken"] = token
    return client.post("/users/register/phone", json=body, headers=auth_headers(user_id))


def _register_email(client, user_id, name):
    return client.post(
        "/users/register/email",
        json={"displayName": name},
        headers=auth_headers(user_id, email=f"{user_id}@example.com"),
    )


@pytest.fixture()
def registered(client):
    assert _register_phone(client, "a", PHONE_A, "Alice", "tok-a").status_code == 201
    assert _register_phone(client, "b", PHONE_B, "Bob", "tok-b").status_code == 201
    assert _register_email(client, "c", "Carol").status_code == 201


def _start(client, initiator, *others):
    response = client.post(
        "/conversations",
        json={"otherUserIds": list(others)},
        headers=auth_headers(initiator),
    )
    assert response.status_code == 200, response.text
    return response.json()["conversationId"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "groupchat" in response.text


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_requests_without_valid_token_are_rejected(client):
    assert client.get("/users/me").status_code in (401, 403)
    response = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert "error" in response.json()


def test_register_with_phone(client):
    response = _register_phone(client, "a", "(650) 253-0000", "Alice", "tok-a")

    assert response.status_code == 201
    assert response.json() == {
        "userId": "a",
        "displayName": "Alice",
        "phoneNumber": PHONE_A,
        "email": None,
        "fcmToken": "tok-a",
    }


def test_register_with_email_from_token_claims(client):
    response = client.post(
        "/users/register/email",
        json={},
        headers=auth_headers("c", email="c@example.com", name="Carol"),
    )

    assert response.status_code == 201
    assert response.json()["email"] == "c@example.com"
    assert response.json()["displayName"] == "Carol"


def test_registration_errors(client, registered):
    assert _register_phone(client, "z", PHONE_A, "Zed").status_code == 409
    assert _register_phone(client, "a", "+16502530009", "Alice again").status_code == 409
    assert _register_phone(client, "z", "12", "Zed").status_code == 400
    response = client.post(
        "/users/register/email", json={"email": "z@example.com"}, headers=auth_headers("z")
    )
    assert response.status_code == 400
    assert response.json() == {"error": "displayName is required"}


def test_me_and_lookup(client, registered):
    me = client.get("/users/me", headers=auth_headers("a"))
    assert me.status_code == 200
    assert me.json()["displayName"] == "Alice"

    assert client.get("/users/me", headers=auth_headers("nobody")).status_code == 404

    found = client.get("/users/lookup", params={"phone": "650-253-0001"}, headers=auth_headers("a"))
    assert found.json()["user"]["userId"] == "b"
    by_email = client.get("/users/lookup", params={"email": "c@example.com"}, headers=auth_headers("a"))
    assert by_email.json()["user"]["userId"] == "c"
    missing = client.get("/users/lookup", params={"email": "x@example.com"}, headers=auth_headers("a"))
    assert missing.json() == {"user": None}
    assert client.get("/users/lookup", headers=auth_headers("a")).status_code == 400

    assert client.get("/users/b", headers=auth_headers("a")).json()["user"]["displayName"] == "Bob"
    assert client.get("/users/ghost", headers=auth_headers("a")).json() == {"user": None}


def test_device_tokens_are_only_visible_to_their_owner(client, registered):
    assert client.get("/users/me", headers=auth_headers("b")).json()["fcmToken"] == "tok-b"

    seen_by_a = [
        client.get("/users/b", headers=auth_headers("a")).json()["user"],
        client.get("/users/lookup", params={"phone": PHONE_B}, headers=auth_headers("a")).json()["user"],
    ]
    cid = _start(client, "a", "b")
    seen_by_a += client.get(f"/conversations/{cid}/members", headers=auth_headers("a")).json()["users"]
    client.post(f"/conversations/{cid}/messages", json={"message": "hi"}, headers=auth_headers("b"))
    conversation = client.get(f"/conversations/{cid}", headers=auth_headers("a")).json()
    seen_by_a += conversation["users"] + [m["sender"] for m in conversation["messages"]]

    assert len(seen_by_a) == 7
    assert all("fcmToken" not in profile for profile in seen_by_a)


def test_bulk_registration(client):
    response = client.post(
        "/users/bulk",
        json={
            "users": [
                {"userId": "x", "displayName": "X", "phoneNumber": PHONE_A},
                {"userId": "y", "displayName": "Y", "email": "y@example.com"},
            ]
        },
        headers=auth_headers("admin"),
    )

    assert response.status_code == 201
    assert [u["userId"] for u in response.json()["users"]] == ["x", "y"]


def test_conversation_flow(client, registered):
    cid = _start(client, "a", "b", "c")
    assert _start(client, "c", "b", "a") == cid

    for sender, text in (("a", "hi all"), ("b", "hello"), ("c", "hey")):
        response = client.post(
            f"/conversations/{cid}/messages",
            json={"message": text, "notify": True},
            headers=auth_headers(sender),
        )
        assert response.status_code == 201, response.text
        assert response.json()["sender"]["userId"] == sender

    conversation = client.get(f"/conversations/{cid}", headers=auth_headers("b")).json()
    assert conversation["conversationId"] == cid
    assert sorted(u["userId"] for u in conversation["users"]) == ["a", "b", "c"]
    messages = conversation["messages"]
    assert [m["message"] for m in messages] == ["hi all", "hello", "hey"]

    later = client.get(
        f"/conversations/{cid}",
        params={"since": messages[0]["timestamp"]},
        headers=auth_headers("b"),
    ).json()
    assert [m["message"] for m in later["messages"]] == ["hello", "hey"]

    ids = client.get("/conversations", headers=auth_headers("a")).json()
    assert ids == {"conversationIds": [cid]}

    history = client.get("/conversations/history", headers=auth_headers("a")).json()
    assert [c["conversationId"] for c in history["conversations"]] == [cid]

    members = client.get(f"/conversations/{cid}/members", headers=auth_headers("a")).json()
    assert sorted(u["userId"] for u in members["users"]) == ["a", "b", "c"]


def test_membership_rules(client, registered):
    cid = _start(client, "a", "b")

    outsider_post = client.post(
        f"/conversations/{cid}/messages", json={"message": "hi"}, headers=auth_headers("c")
    )
    assert outsider_post.status_code == 403
    assert outsider_post.json() == {"error": "Sender is not part of the conversation"}
    assert client.get(f"/conversations/{cid}", headers=auth_headers("c")).status_code == 403

    assert client.post(f"/conversations/{cid}/join", headers=auth_headers("c")).status_code == 204
    assert client.post(f"/conversations/{cid}/join", headers=auth_headers("c")).status_code == 409
    assert client.post(f"/conversations/{cid}/leave", headers=auth_headers("c")).status_code == 204
    assert client.post(f"/conversations/{cid}/leave", headers=auth_headers("c")).status_code == 409


def test_unregistered_sender_is_forbidden(client, registered):
    cid = _start(client, "a", "b")

    response = client.post(
        f"/conversations/{cid}/messages", json={"message": "hi"}, headers=auth_headers("ghost")
    )

    assert response.status_code == 403


def test_initiate_errors(client, registered):
    headers = auth_headers("a")
    assert client.post("/conversations", json={"otherUserIds": []}, headers=headers).status_code == 400
    assert client.post("/conversations", json={"otherUserIds": ["a"]}, headers=headers).status_code == 400
    assert client.post("/conversations", json={"otherUserIds": ["ghost"]}, headers=headers).status_code == 404

    response = client.post("/conversations", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"


def test_profile_update_refreshes_past_messages(client, registered):
    cid = _start(client, "a", "b")
    client.post(f"/conversations/{cid}/messages", json={"message": "hi"}, headers=auth_headers("a"))

    response = client.patch("/users/me", json={"displayName": "Alicia"}, headers=auth_headers("a"))
    assert response.status_code == 200
    assert response.json()["displayName"] == "Alicia"
    assert response.json()["fcmToken"] == "tok-a"

    conversation = client.get(f"/conversations/{cid}", headers=auth_headers("b")).json()
    assert conversation["messages"][0]["sender"]["displayName"] == "Alicia"

    assert client.patch("/users/me", json={}, headers=auth_headers("a")).status_code == 400
    assert client.patch("/users/me", json={"displayName": "X"}, headers=auth_headers("nobody")).status_code == 404


def test_delete_me(client, registered):
    assert client.delete("/users/me", headers=auth_headers("a")).status_code == 204
    assert client.get("/users/me", headers=auth_headers("a")).status_code == 404
    assert _register_phone(client, "a2", PHONE_A, "Alice").status_code == 201
