from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.api.server import create_app
from app.config import Settings
from app.domain.errors import StorageError
from app.infra.repository import TaskRepository
from app.infra.storage import InMemoryStorage, JsonFileStorage
from app.services.task_service import TaskService


def make_settings(tmp_path: Path, **overrides) -> Settings:
    return Settings(tasks_file=tmp_path / "tasks.json", **overrides)


@pytest.fixture
def client() -> TestClient:
    service = TaskService(TaskRepository(InMemoryStorage()))
    return TestClient(create_app(service, Settings(tasks_file=Path("unused.json"))))


def test_list_starts_empty(client: TestClient) -> None:
    response = client.get("/api/tasks")

    assert response.status_code == 200
    assert response.json() == []


def test_create_returns_201_with_task_shape(client: TestClient) -> None:
    response = client.post("/api/tasks", json={"title": "  Buy milk "})

    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"id", "title", "description", "completed", "createdAt", "updatedAt"}
    assert body["title"] == "Buy milk"
    assert body["description"] == ""
    assert body["completed"] is False
    assert body["createdAt"] == body["updatedAt"]
    assert body["createdAt"].endswith("Z")


@pytest.mark.parametrize("payload", [{}, {"title": ""}, {"title": "   "}, {"description": "x"}])
def test_create_without_title_is_400(client: TestClient, payload: dict) -> None:
    response = client.post("/api/tasks", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Task title is required"}
    assert client.get("/api/tasks").json() == []


def test_create_with_non_json_body_is_400(client: TestClient) -> None:
    response = client.post("/api/tasks", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_update_changes_supplied_fields(client: TestClient) -> None:
    created = client.post("/api/tasks", json={"title": "Walk dog", "description": "around the block"}).json()

    response = client.put(f"/api/tasks/{created['id']}", json={"completed": True})

    assert response.status_code == 200
    body = response.json()
    assert body["completed"] is True
    assert body["title"] == "Walk dog"
    assert body["description"] == "around the block"
    assert body["createdAt"] == created["createdAt"]


def test_update_blank_title_is_400(client: TestClient) -> None:
    created = client.post("/api/tasks", json={"title": "Keep"}).json()

    response = client.put(f"/api/tasks/{created['id']}", json={"title": " "})

    assert response.status_code == 400
    assert response.json() == {"error": "Task title cannot be empty"}
    assert client.get("/api/tasks").json()[0]["title"] == "Keep"


def test_update_unknown_id_is_404(client: TestClient) -> None:
    response = client.put("/api/tasks/missing", json={"completed": True})

    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


def test_delete_returns_deleted_task(client: TestClient) -> None:
    first = client.post("/api/tasks", json={"title": "Buy milk"}).json()
    second = client.post("/api/tasks", json={"title": "Walk dog"}).json()

    response = client.delete(f"/api/tasks/{second['id']}")

    assert response.status_code == 200
    assert response.json() == second
    assert [t["id"] for t in client.get("/api/tasks").json()] == [first["id"]]


def test_delete_unknown_id_is_404(client: TestClient) -> None:
    response = client.delete("/api/tasks/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_unexpected_error_is_generic_500() -> None:
    class ExplodingService(TaskService):
        def list_tasks(self):
            raise RuntimeError("secret internals")

    app = create_app(ExplodingService(TaskRepository(InMemoryStorage())), Settings(tasks_file=Path("unused.json")))
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/tasks")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "secret" not in response.text


def test_strict_write_failure_is_500() -> None:
    class ReadOnlyStorage(InMemoryStorage):
        def save(self, tasks) -> None:
            raise StorageError("read-only")

    repo = TaskRepository(ReadOnlyStorage(), strict_writes=True)
    client = TestClient(create_app(TaskService(repo), Settings(tasks_file=Path("unused.json"))))

    response = client.post("/api/tasks", json={"title": "Lost"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to save tasks"}


def test_default_app_persists_to_configured_file(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    client = TestClient(create_app(settings=settings))

    assert settings.tasks_file.read_text(encoding="utf-8") == "[]"

    created = client.post("/api/tasks", json={"title": "Persisted"}).json()

    stored = JsonFileStorage(settings.tasks_file).load()
    assert [t.id for t in stored] == [created["id"]]


def test_static_dir_is_served(tmp_path: Path) -> None:
    static_dir = tmp_path / "frontend"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>Tasks</h1>", encoding="utf-8")
    client = TestClient(create_app(settings=make_settings(tmp_path, static_dir=static_dir)))

    assert client.get("/").text == "<h1>Tasks</h1>"
    assert client.get("/api/tasks").json() == []


def test_update_without_body_only_refreshes_updated_at(client: TestClient) -> None:
    created = client.post("/api/tasks", json={"title": "Untouched", "description": "same"}).json()

    response = client.put(f"/api/tasks/{created['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Untouched"
    assert body["description"] == "same"
    assert body["completed"] is False
    assert body["createdAt"] == created["createdAt"]


def test_update_with_non_string_title_is_400(client: TestClient) -> None:
    created = client.post("/api/tasks", json={"title": "Keep"}).json()

    response = client.put(f"/api/tasks/{created['id']}", json={"title": 5})

    assert response.status_code == 400
    assert response.json() == {"error": "Task title must be a string"}
    assert client.get("/api/tasks").json()[0]["title"] == "Keep"
