def _register(client, username="alice", password="pw1"):
    return client.post("/register", json={"username": username, "password": password})


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["queue"] == {"pending": 0, "busy": False, "processed": 0}


def test_register(client):
    res = _register(client)
    assert res.status_code == 201
    assert res.json() == {"username": "alice"}


def test_register_rejects_empty_and_duplicate(client):
    res = _register(client, username="")
    assert res.status_code == 400
    assert res.json()["detail"] == "Username cannot be empty"

    _register(client)
    res = _register(client, password="other")
    assert res.status_code == 400
    assert res.json() == {
        "error": "bad_request",
        "detail": "Username alice is already registered",
    }


def test_register_requires_post(client):
    assert client.get("/register").status_code == 405


def test_submit_and_resubmit(client, executor):
    _register(client)
    res = client.post(
        "/submit", json={"task_name": "task1", "code": "OK"}, auth=("alice", "pw1")
    )
    assert res.status_code == 200
    assert res.json() == {"passed": True, "error": ""}
    assert '<td class="Succeeded">Succeeded</td>' in client.get("/scoreboard").text

    res = client.post(
        "/submit", json={"task_name": "task1", "code": "BAD"}, auth=("alice", "pw1")
    )
    assert res.status_code == 200
    assert res.json() == {"passed": False, "error": "task task1 failed: wrong answer"}
    page = client.get("/scoreboard").text
    assert '<td class="Failed">Failed</td>' in page
    assert "Succeeded</td>" not in page
    assert executor.calls == [("alice", "OK"), ("alice", "BAD")]


def test_submit_without_registration(client, executor, app):
    res = client.post("/submit", json={"task_name": "task1", "code": "OK"}, auth=("bob", "x"))
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Basic"
    assert res.json()["error"] == "unauthorized"
    assert executor.calls == []
    assert app.state.queue.processed == 0
    assert app.state.coordinator.results.snapshot() == {}


def test_submit_without_credentials(client, executor):
    res = client.post("/submit", json={"task_name": "task1", "code": "OK"})
    assert res.status_code == 401
    assert executor.calls == []


def test_submit_with_wrong_password(client, executor):
    _register(client)
    res = client.post("/submit", json={"task_name": "task1", "code": "OK"}, auth=("alice", "nope"))
    assert res.status_code == 401
    assert executor.calls == []


def test_bad_credentials_checked_before_body_validation(client):
    res = client.post("/submit", json={"code": 1}, auth=("bob", "x"))
    assert res.status_code == 401


def test_submit_unknown_task(client, executor):
    _register(client)
    res = client.post("/submit", json={"task_name": "nope", "code": "OK"}, auth=("alice", "pw1"))
    assert res.status_code == 404
    assert res.json() == {
        "error": "not_found",
        "detail": "task nope not found",
        "context": {"task": "nope"},
    }
    assert executor.calls == []


def test_submit_malformed_body(client, executor):
    _register(client)
    res = client.post("/submit", json={"code": "OK"}, auth=("alice", "pw1"))
    assert res.status_code == 422
    res = client.post(
        "/submit",
        json={"task_name": "task1", "code": "OK", "files": {"../etc/passwd": ""}},
        auth=("alice", "pw1"),
    )
    assert res.status_code == 422
    assert executor.calls == []


def test_submission_is_attributed_to_authenticated_user(client, app):
    _register(client, "carol", "pw")
    client.post(
        "/submit",
        json={"task_name": "task2", "language": "go", "code": "OK", "username": "mallory"},
        auth=("carol", "pw"),
    )
    results = app.state.coordinator.results.snapshot()
    assert list(results) == ["carol"]


def test_tasks(client):
    res = client.get("/tasks")
    assert res.status_code == 200
    assert res.json() == [
        {"name": "task1", "description": "first task"},
        {"name": "task2", "description": ""},
    ]


def test_scoreboard(client):
    _register(client, "zed", "pw")
    _register(client, "amy", "pw")
    client.post("/submit", json={"task_name": "task2", "code": "OK"}, auth=("zed", "pw"))
    res = client.get("/scoreboard")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    page = res.text
    assert page.index("<th>task1</th>") < page.index("<th>task2</th>")
    assert page.index("<td>amy</td>") < page.index("<td>zed</td>")
    assert page.count('<td class=""></td>') == 3


def test_scoreboard_escapes_usernames(client):
    _register(client, "<script>", "pw")
    page = client.get("/scoreboard").text
    assert "<td>&lt;script&gt;</td>" in page
