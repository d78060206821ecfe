import pytest
from starlette.testclient import TestClient

from todo_api.runtime import AppContext
from todo_api.server import create_app
from todo_api.util.log import Log, LogFormat, LogLevel
from tests.helpers import create_test_app_context, make_todo


def test_put_without_body_is_bad_request(client: TestClient) -> None:
    response = client.put("/80", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_malformed_json_is_bad_request(client: TestClient) -> None:
    response = client.post("/", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["reason"] == "Request body is malformed."
    assert client.get("/").json() == []


def test_missing_fields_are_bad_request(client: TestClient) -> None:
    response = client.post("/", json={"id": 1, "title": "no priority"})

    assert response.status_code == 400
    assert response.json()["details"][0]["loc"] == ["body", "priority"]


def test_out_of_range_priority_is_rejected(client: TestClient) -> None:
    for priority in (0, 6, -1, "high"):
        response = client.post("/", json={"id": 1, "title": "t", "priority": priority})
        assert response.status_code == 400, priority

    assert client.get("/").json() == []


def test_priority_given_as_text_is_accepted(client: TestClient) -> None:
    response = client.post("/", json={"id": 1, "title": "t", "priority": "2"})

    assert response.status_code == 200
    assert client.get("/1").json()["priority"] == 2


def test_negative_body_id_is_rejected(client: TestClient) -> None:
    response = client.post("/", json={"id": -3, "title": "t", "priority": 2})

    assert response.status_code == 400


def test_put_with_mismatched_body_id_is_rejected(client: TestClient, app_ctx: AppContext) -> None:
    app_ctx.store.insert(make_todo(1, "original"))

    response = client.put("/1", json={"id": 2, "title": "moved", "priority": 1})

    assert response.status_code == 400
    assert "does not match" in response.json()["reason"]
    assert client.get("/1").json()["title"] == "original"
    assert client.get("/2").status_code == 404


@pytest.mark.parametrize(("method", "path"), [("PUT", "/"), ("DELETE", "/"), ("POST", "/1"), ("PATCH", "/1")])
def test_unserved_method_returns_not_found_body(client: TestClient, method: str, path: str) -> None:
    response = client.request(method, path, json={"id": 1, "title": "t", "priority": 2})

    assert response.status_code == 404
    assert response.json() == {"status": "error", "reason": "Resource was not found."}
    assert client.get("/").json() == []


def test_lock_failure_is_internal_error_and_server_recovers() -> None:
    with create_test_app_context(lock_timeout=0.01) as ctx:
        ctx.store.insert(make_todo(1))
        with TestClient(create_app(ctx, access_log=False)) as client:
            ctx.store._lock.acquire()
            try:
                failed = client.get("/1")
            finally:
                ctx.store._lock.release()

            assert failed.status_code == 500
            assert failed.json() == {"status": "error", "reason": "Internal server error."}

            recovered = client.get("/1")
            assert recovered.status_code == 200
            assert recovered.json()["id"] == 1


def test_unexpected_error_is_internal_error(monkeypatch, app_ctx: AppContext) -> None:  # type: ignore[no-untyped-def]
    def broken_list(self):
        raise KeyError("unexpected-key")

    monkeypatch.setattr("todo_api.app_services.todo_service.TodoService.list", broken_list)

    app = create_app(app_ctx, access_log=False)
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/")

    assert response.status_code == 500
    assert response.json()["reason"] == "Internal server error."
    assert "details" not in response.json()


def test_unexpected_error_is_logged_once(monkeypatch, capsys, app_ctx: AppContext) -> None:  # type: ignore[no-untyped-def]
    def broken_get(self, todo_id):
        raise RuntimeError("boom")

    monkeypatch.setattr("todo_api.app_services.todo_service.TodoService.get", broken_get)
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=False)

    app = create_app(app_ctx)
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/1", headers={"X-Request-ID": "req-500"})

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "req-500"

    failures = [line for line in capsys.readouterr().err.splitlines() if "level=error" in line]
    assert len(failures) == 1
    assert "request_id=req-500" in failures[0]
    assert "error_type=RuntimeError" in failures[0]
