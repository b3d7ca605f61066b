"""
End-to-end checks of the HTTP contract through FastAPI's TestClient.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient

from postboard.app import create_app
from postboard.domain.errors import PersistenceError
from postboard.repositories.json_storage import DocumentStore

from conftest import make_settings


def _register(client, email="ana@example.com", mobile="5550001", password="pw-one"):
    return client.post(
        "/register",
        json={"username": email.split("@")[0], "email": email, "password": password, "mobile": mobile},
    )


def _user_id(app, email="ana@example.com") -> str:
    return app.state.users.find_by_email(email).id


def _make_post(client, user_id, title="Hello", description="body"):
    resp = client.post("/createPost", json={"userId": user_id, "title": title, "description": description})
    assert resp.status_code == 201
    return resp.json()["post"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers["x-content-type-options"] == "nosniff"


def test_register_and_login(client):
    resp = _register(client)
    assert resp.status_code == 201
    assert resp.json() == {"message": "User registered successfully."}

    resp = client.post("/login", json={"email": "ana@example.com", "password": "pw-one"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Login successful", "userRole": "user"}


def test_register_duplicate_is_400(client):
    _register(client)
    resp = _register(client, mobile="5559999")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email or mobile already in use."}


def test_login_with_wrong_password_is_401(client):
    _register(client)
    resp = client.post("/login", json={"email": "ana@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid credentials."}


def test_missing_fields_are_422(client):
    resp = client.post("/register", json={"email": "ana@example.com"})
    assert resp.status_code == 422


def test_post_lifecycle(app, client):
    _register(client)
    uid = _user_id(app)
    post = _make_post(client, uid)
    assert post["userId"] == uid
    assert post["comments"] == [] and post["likes"] == []

    resp = client.post("/addComment", json={"postId": post["id"], "userId": uid, "commentText": "nice"})
    assert resp.status_code == 201
    assert resp.json() == {"message": "Comment added"}

    resp = client.post("/likePost", json={"postId": post["id"], "userId": uid})
    assert resp.json() == {"message": "Post liked/unliked", "likesCount": 1}
    resp = client.post("/likePost", json={"postId": post["id"], "userId": uid})
    assert resp.json()["likesCount"] == 0

    resp = client.post(
        "/editPost",
        json={"postId": post["id"], "userId": uid, "title": "Edited", "description": "new"},
    )
    assert resp.status_code == 200
    assert resp.json()["post"]["title"] == "Edited"

    listed = client.post("/posts", json={"userId": uid}).json()
    assert [p["id"] for p in listed] == [post["id"]]
    assert [c["text"] for c in listed[0]["comments"]] == ["nice"]

    resp = client.post("/deletePost", json={"postId": post["id"], "userId": uid, "userRole": "user"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Post deleted"}
    assert client.post("/posts", json={"userId": uid}).json() == []


def test_create_post_for_unknown_user_is_404(client):
    resp = client.post("/createPost", json={"userId": "ghost", "title": "t", "description": "d"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_create_post_lenient_owner(data_dir):
    app = create_app(make_settings(data_dir, require_known_owner=False))
    with TestClient(app) as client:
        post = _make_post(client, "ghost")
    assert post["userId"] == "ghost"


def test_missing_post_responses(client):
    body = {"postId": "missing", "userId": "u1"}
    assert client.post("/addComment", json={**body, "commentText": "x"}).status_code == 404
    assert client.post("/likePost", json=body).json() == {"message": "Post not found"}

    resp = client.post("/editPost", json={**body, "title": "t", "description": "d"})
    assert resp.status_code == 403
    assert resp.json() == {"message": "Permission denied or post not found"}

    resp = client.post("/deletePost", json=body)
    assert resp.status_code == 403
    assert resp.json() == {"message": "Permission denied"}


def test_foreign_post_permissions(app, client):
    _register(client)
    _register(client, email="bob@example.com", mobile="5550002")
    owner, stranger = _user_id(app), _user_id(app, "bob@example.com")
    post = _make_post(client, owner, title="keep")

    resp = client.post(
        "/editPost",
        json={"postId": post["id"], "userId": stranger, "title": "x", "description": "x"},
    )
    assert resp.status_code == 403
    resp = client.post("/deletePost", json={"postId": post["id"], "userId": stranger, "userRole": "user"})
    assert resp.status_code == 403
    assert client.post("/posts", json={"userId": owner}).json()[0]["title"] == "keep"

    resp = client.post("/deletePost", json={"postId": post["id"], "userId": stranger, "userRole": "admin"})
    assert resp.status_code == 200
    assert client.post("/posts", json={"userId": owner}).json() == []


def test_concurrent_comment_requests(app, client):
    _register(client)
    uid = _user_id(app)
    post = _make_post(client, uid)

    def comment(i: int) -> int:
        resp = client.post("/addComment", json={"postId": post["id"], "userId": uid, "commentText": f"c{i}"})
        return resp.status_code

    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = list(pool.map(comment, range(25)))

    assert codes == [201] * 25
    assert len(app.state.posts.get(post["id"]).comments) == 25


def test_storage_failure_is_500(client, monkeypatch):
    def broken_store(self, records):
        raise PersistenceError("disk full")

    monkeypatch.setattr(DocumentStore, "store", broken_store)
    resp = _register(client)
    assert resp.status_code == 500
    assert resp.json() == {"message": "Storage failure"}


def test_auth_rate_limit(data_dir):
    app = create_app(make_settings(data_dir, auth_rate_limit=2))
    with TestClient(app) as client:
        codes = [client.post("/login", json={"email": "x@example.com", "password": "x"}).status_code for _ in range(3)]
    assert codes == [401, 401, 429]
