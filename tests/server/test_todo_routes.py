from starlette.testclient import TestClient

from todo_api.runtime import AppContext
from todo_api.server import create_app
from tests.helpers import make_todo

NOT_FOUND = {"status": "error", "reason": "Resource was not found."}


def test_empty_store_lists_empty_array(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "[]"


def test_post_get_put_get(client: TestClient) -> None:
    assert client.get("/1").status_code == 404

    created = client.post("/", json={"id": 1, "title": "write tests", "priority": 4})
    assert created.status_code == 200
    assert created.json() == {"status": "ok"}

    fetched = client.get("/1")
    assert fetched.status_code == 200
    assert fetched.json() == {"id": 1, "priority": 4, "title": "write tests"}

    updated = client.put("/1", json={"id": 1, "title": "write tests updated", "priority": 3})
    assert updated.status_code == 200
    assert updated.json() == {"status": "ok"}

    fetched = client.get("/1")
    assert fetched.status_code == 200
    assert "write tests updated" in fetched.text
    assert fetched.json()["title"] != "write tests"
    assert fetched.json()["priority"] == 3


def test_list_returns_all_todos(client: TestClient, app_ctx: AppContext) -> None:
    for todo_id in (1, 2, 3):
        app_ctx.store.insert(make_todo(todo_id, f"todo {todo_id}"))

    response = client.get("/")

    assert response.status_code == 200
    assert sorted(item["id"] for item in response.json()) == [1, 2, 3]


def test_post_overwrites_existing_id(client: TestClient) -> None:
    client.post("/", json={"id": 7, "title": "first", "priority": 1})
    client.post("/", json={"id": 7, "title": "second", "priority": 2})

    listed = client.get("/").json()
    assert listed == [{"id": 7, "priority": 2, "title": "second"}]


def test_delete_is_idempotent(client: TestClient, app_ctx: AppContext) -> None:
    app_ctx.store.insert(make_todo(5))

    first = client.delete("/5")
    second = client.delete("/5")

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json() == second.json() == {"status": "ok"}
    assert client.get("/5").status_code == 404


def test_get_missing_id_returns_not_found_body(client: TestClient) -> None:
    response = client.get("/99")

    assert response.status_code == 404
    assert response.json() == NOT_FOUND


def test_put_missing_id_returns_not_found(client: TestClient) -> None:
    response = client.put("/80", json={"id": 80, "title": "todo-1", "priority": 4})

    assert response.status_code == 404
    assert response.json() == NOT_FOUND
    assert client.get("/").json() == []


def test_non_integer_id_returns_not_found(client: TestClient) -> None:
    for path in ("/hi", "/-1", "/1.5"):
        response = client.get(path)
        assert response.status_code == 404
        assert response.json() == NOT_FOUND


def test_unmatched_route_returns_not_found(client: TestClient) -> None:
    response = client.get("/todos/1/extra")

    assert response.status_code == 404
    assert response.json() == NOT_FOUND


def test_api_docs_routes_are_disabled(client: TestClient) -> None:
    for path in ("/docs", "/redoc", "/openapi.json", "/docs/oauth2-redirect"):
        response = client.get(path)
        assert response.status_code == 404, path
        assert response.json() == NOT_FOUND


def test_health_reports_record_count(client: TestClient, app_ctx: AppContext) -> None:
    app_ctx.store.insert(make_todo(1))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "todos": 1}


def test_apps_do_not_share_stores() -> None:
    first, second = AppContext(), AppContext()
    with TestClient(create_app(first, access_log=False)) as a, TestClient(create_app(second, access_log=False)) as b:
        a.post("/", json={"id": 1, "title": "only in a", "priority": 1})

        assert len(a.get("/").json()) == 1
        assert b.get("/").json() == []


def test_request_id_header_is_echoed(client: TestClient) -> None:
    response = client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/").headers["X-Request-ID"]
