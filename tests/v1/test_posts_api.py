# tests/v1/test_posts_api.py
"""API tests for feed and post endpoints."""

from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict[str, str], title: str = "Hello", content: str = "World"):
    return client.post("/api/v1/posts", json={"title": title, "content": content}, headers=headers)


def test_empty_feed(client: TestClient) -> None:
    r = client.get("/api/v1/feed")
    assert r.status_code == 200
    assert r.json() == []


def test_create_post_requires_login(client: TestClient) -> None:
    r = _create(client, {})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
    detail = r.json()["detail"]
    assert detail["reason"] == "login_required"
    assert detail["login_url"] == "/api/v1/auth/callback"


def test_invalid_token_counts_as_logged_out(client: TestClient) -> None:
    r = _create(client, {"Authorization": "Bearer garbage"})
    assert r.status_code == 401


def test_create_post_requires_username(client: TestClient, provisional_user, headers_for) -> None:
    r = _create(client, headers_for(provisional_user))
    assert r.status_code == 403
    detail = r.json()["detail"]
    assert detail["reason"] == "username_required"
    assert detail["username_url"] == "/api/v1/username"


def test_create_and_fetch_post(client: TestClient, alice, alice_headers) -> None:
    r = _create(client, alice_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Hello"
    assert body["author"] == "alice"
    assert body["author_id"] == alice.id
    assert body["like_count"] == 0
    assert body["edited"] is False

    fetched = client.get(f"/api/v1/posts/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body


def test_create_post_rejects_empty_title(client: TestClient, alice_headers) -> None:
    r = _create(client, alice_headers, title="  ")
    assert r.status_code == 400
    assert r.json()["detail"]["reason"] == "empty_title"


def test_unknown_post_is_404(client: TestClient) -> None:
    r = client.get("/api/v1/posts/999")
    assert r.status_code == 404
    assert r.json()["detail"]["reason"] == "post_not_found"


def test_like_rules(client: TestClient, alice_headers, bob_headers) -> None:
    post_id = _create(client, alice_headers).json()["id"]

    r = client.post(f"/api/v1/posts/{post_id}/like", headers=bob_headers)
    assert r.status_code == 200
    assert r.json() == {"post_id": post_id, "like_count": 1}

    own = client.post(f"/api/v1/posts/{post_id}/like", headers=alice_headers)
    assert own.status_code == 403
    assert own.json()["detail"]["reason"] == "self_like"

    anonymous = client.post(f"/api/v1/posts/{post_id}/like")
    assert anonymous.status_code == 401

    missing = client.post("/api/v1/posts/999/like", headers=bob_headers)
    assert missing.status_code == 404

    assert client.get(f"/api/v1/posts/{post_id}").json()["like_count"] == 1


def test_edit_rules(client: TestClient, alice_headers, bob_headers) -> None:
    post_id = _create(client, alice_headers).json()["id"]
    payload = {"title": "Changed", "content": "Text"}

    assert client.put(f"/api/v1/posts/{post_id}", json=payload).status_code == 401
    foreign = client.put(f"/api/v1/posts/{post_id}", json=payload, headers=bob_headers)
    assert foreign.status_code == 403
    assert foreign.json()["detail"]["reason"] == "not_author"

    r = client.put(f"/api/v1/posts/{post_id}", json=payload, headers=alice_headers)
    assert r.status_code == 200
    assert r.json()["title"] == "Changed"
    assert r.json()["edited"] is True


def test_delete_rules(client: TestClient, alice_headers, bob_headers) -> None:
    post_id = _create(client, alice_headers).json()["id"]

    assert client.delete(f"/api/v1/posts/{post_id}").status_code == 401
    assert client.delete(f"/api/v1/posts/{post_id}", headers=bob_headers).status_code == 403

    r = client.delete(f"/api/v1/posts/{post_id}", headers=alice_headers)
    assert r.status_code == 204
    newer_id = _create(client, alice_headers, title="newer").json()["id"]
    assert newer_id != post_id

    again = client.delete(f"/api/v1/posts/{post_id}", headers=alice_headers)
    assert again.status_code == 404
    assert client.get(f"/api/v1/posts/{post_id}").status_code == 404
    assert client.get(f"/api/v1/posts/{newer_id}").status_code == 200


def test_feed_sorting(client: TestClient, alice_headers, bob_headers) -> None:
    first = _create(client, alice_headers, title="first").json()["id"]
    second = _create(client, alice_headers, title="second").json()["id"]
    client.post(f"/api/v1/posts/{first}/like", headers=bob_headers)

    newest = [p["id"] for p in client.get("/api/v1/feed").json()]
    assert newest == [second, first]

    oldest = [p["id"] for p in client.get("/api/v1/feed", params={"sort": "recency-asc"}).json()]
    assert oldest == [first, second]

    liked = [p["id"] for p in client.get("/api/v1/feed", params={"sort": "likes-desc"}).json()]
    assert liked == [first, second]

    fallback = [p["id"] for p in client.get("/api/v1/feed", params={"sort": "weird"}).json()]
    assert fallback == newest
