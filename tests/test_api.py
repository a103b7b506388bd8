from conftest import bearer, signup


def test_signup_example(client):
    res = client.post("/auth/signup", json={"email": "a@x.com", "password": "p"})
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["token"]
    assert body["user"]["name"] == ""
    assert body["user"]["email"] == "a@x.com"
    assert set(body["user"]) == {"id", "name", "email"}

    again = client.post("/auth/signup", json={"email": "a@x.com", "password": "other"})
    assert again.status_code == 400
    assert again.json() == {"error": "Email exists"}


def test_signup_missing_fields(client):
    res = client.post("/auth/signup", json={"name": "Ann", "email": "a@x.com"})
    assert res.status_code == 400
    assert res.json() == {"error": "Missing fields"}


def test_malformed_body_is_400(client):
    res = client.post(
        "/auth/signup", content="not json", headers={"Content-Type": "application/json"}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request body"}


def test_login_and_me(client):
    created = signup(client, name="Ann")

    res = client.post("/auth/login", json={"email": "a@x.com", "password": "p"})
    assert res.status_code == 200, res.text
    token = res.json()["token"]
    assert res.json()["user"] == created["user"]

    me = client.get("/auth/me", headers=bearer(token))
    assert me.status_code == 200, me.text
    assert me.json() == {
        "id": created["user"]["id"],
        "name": "Ann",
        "email": "a@x.com",
        "watchlist": [],
    }


def test_login_failures_share_one_response(client):
    signup(client)

    wrong = client.post("/auth/login", json={"email": "a@x.com", "password": "nope"})
    unknown = client.post("/auth/login", json={"email": "b@x.com", "password": "p"})

    assert wrong.status_code == unknown.status_code == 400
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}


def test_protected_routes_need_token(client):
    for path in ("/auth/me", "/api/watchlist"):
        res = client.get(path)
        assert res.status_code == 401
        assert res.json() == {"error": "Missing auth token"}

    res = client.get("/auth/me", headers=bearer("garbage"))
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid token"}

    res = client.post("/api/watchlist", json={"movie": {"id": 1}}, headers={"Authorization": "Bearer"})
    assert res.status_code == 401


def test_expired_token_rejected(client, auth, store):
    from datetime import datetime, timedelta, timezone

    signup(client)
    user = store.find_by_email("a@x.com")
    token = auth.issue_token(user, now=datetime.now(timezone.utc) - timedelta(days=7, seconds=1))

    res = client.get("/api/watchlist", headers=bearer(token))
    assert res.status_code == 401


def test_me_for_deleted_user_is_404(client, store):
    token = signup(client)["token"]
    store.save([])

    assert client.get("/auth/me", headers=bearer(token)).status_code == 404
    res = client.get("/api/watchlist", headers=bearer(token))
    assert res.status_code == 404
    assert res.json() == {"error": "User not found"}
    res = client.post("/api/watchlist", json={"movie": {"id": 1}}, headers=bearer(token))
    assert res.status_code == 404


def test_watchlist_toggle_example(client):
    token = signup(client)["token"]
    movie = {"movie": {"id": 42, "title": "T"}}

    first = client.post("/api/watchlist", json=movie, headers=bearer(token))
    assert first.status_code == 200, first.text
    assert first.json() == {"watchlist": [{"id": 42, "title": "T"}]}

    listed = client.get("/api/watchlist", headers=bearer(token))
    assert listed.json() == {"watchlist": [{"id": 42, "title": "T"}]}

    second = client.post("/api/watchlist", json=movie, headers=bearer(token))
    assert second.status_code == 200
    assert second.json() == {"watchlist": []}


def test_watchlist_toggle_missing_movie(client, store):
    token = signup(client)["token"]
    client.post(
        "/api/watchlist",
        json={"movie": {"id": 7, "title": "Seven", "poster_path": "/s.jpg"}},
        headers=bearer(token),
    )

    for body in ({}, {"movie": {"title": "No id"}}):
        res = client.post("/api/watchlist", json=body, headers=bearer(token))
        assert res.status_code == 400
        assert res.json() == {"error": "Missing movie"}

    [user] = store.load()
    assert user.watchlist == [{"id": 7, "title": "Seven", "poster_path": "/s.jpg"}]


def test_watchlists_are_per_user(client):
    t1 = signup(client, email="a@x.com")["token"]
    t2 = signup(client, email="b@x.com")["token"]

    client.post("/api/watchlist", json={"movie": {"id": 1, "title": "One"}}, headers=bearer(t1))

    assert len(client.get("/api/watchlist", headers=bearer(t1)).json()["watchlist"]) == 1
    assert client.get("/api/watchlist", headers=bearer(t2)).json()["watchlist"] == []


def test_app_shell_served_for_unknown_paths(client):
    for path in ("/", "/some/deep/link"):
        res = client.get(path)
        assert res.status_code == 200
        assert "text/html" in res.headers["content-type"]
        assert 'id="route-root"' in res.text
        assert '"account"' in res.text


def test_static_assets(client):
    res = client.get("/static/app.js")
    assert res.status_code == 200
    assert "hashchange" in res.text


def test_overlong_password_gets_json_errors(client):
    res = client.post("/auth/signup", json={"email": "long@x.com", "password": "x" * 100})
    assert res.status_code == 400
    assert res.json() == {"error": "Password must be at most 72 bytes"}

    signup(client, email="a@x.com", password="p")
    res = client.post("/auth/login", json={"email": "a@x.com", "password": "x" * 100})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid credentials"}


def test_routing_errors_use_error_body(client):
    res = client.post("/auth/me")
    assert res.status_code == 405
    assert res.json() == {"error": "Method Not Allowed"}
    assert "GET" in res.headers["allow"]

    res = client.get("/static/missing.js")
    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}


def test_watchlist_toggle_without_body(client, store):
    token = signup(client)["token"]

    res = client.post("/api/watchlist", headers=bearer(token))
    assert res.status_code == 400
    assert res.json() == {"error": "Missing movie"}

    store.save([])
    res = client.post("/api/watchlist", headers=bearer(token))
    assert res.status_code == 404
    assert res.json() == {"error": "User not found"}
