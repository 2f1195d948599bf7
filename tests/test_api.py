"""
Тесты для API endpoints.

Проверяем:
- HTTP статусы и формат ответов
- Трёхзначную семантику tags в PUT (нет поля / null / [] / список)
- Формат ошибок ErrorResponse
- Авторизацию по X-API-Key
- Служебные endpoints (/, /health) и заголовок X-Request-ID
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from solo_api import main
from solo_api.main import app

TASKS_URL = "/api/v1/tasks"
TAGS_URL = "/api/v1/tags"
AGENTS_URL = "/api/v1/agents"
PROJECTS_URL = "/api/v1/projects"
MISSING_ID = "00000000-0000-0000-0000-000000000000"


async def create_task(client: AsyncClient, **payload) -> dict:
    payload.setdefault("title", "API task")
    response = await client.post(TASKS_URL, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


# ============================================================================
# TASKS: CREATE / GET / LIST
# ============================================================================


@pytest.mark.asyncio
async def test_create_task(test_client):
    """Test: POST /tasks - 201, теги в порядке запроса."""
    response = await test_client.post(
        TASKS_URL,
        json={"title": "Set up CI", "assignee": "alice", "tags": ["urgent", "backend"]},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Set up CI"
    assert data["status"] == "todo"
    assert data["description"] == ""
    assert data["tags"] == ["urgent", "backend"]
    assert "id" in data
    assert "created_at" in data
    assert "updated_at" in data


@pytest.mark.asyncio
async def test_create_task_missing_title(test_client):
    """Test: без title - 422 в формате ErrorResponse."""
    response = await test_client.post(TASKS_URL, json={"tags": ["x"]})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"] == "title" for d in error["details"])


@pytest.mark.asyncio
async def test_create_task_blank_title(test_client):
    """Test: title из пробелов проходит схему, но отклоняется сервисом (400)."""
    response = await test_client.post(TASKS_URL, json={"title": "   "})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"] == [{"field": "title", "message": "Task title cannot be empty"}]


@pytest.mark.asyncio
async def test_create_task_null_tags(test_client):
    """Test: tags: null при создании - задача без тегов."""
    response = await test_client.post(TASKS_URL, json={"title": "No tags", "tags": None})

    assert response.status_code == 201
    assert response.json()["tags"] == []


@pytest.mark.asyncio
async def test_create_task_tag_name_too_long(test_client):
    """Test: имя тега длиннее 100 символов - 422, задача не создаётся."""
    response = await test_client.post(TASKS_URL, json={"title": "Long", "tags": ["x" * 101]})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await test_client.get(TASKS_URL)).json()["total"] == 0


@pytest.mark.asyncio
async def test_update_task_tag_name_too_long(test_client):
    created = await create_task(test_client, tags=["a"])

    response = await test_client.put(f"{TASKS_URL}/{created['id']}", json={"tags": ["y" * 101]})

    assert response.status_code == 422
    assert (await test_client.get(f"{TASKS_URL}/{created['id']}")).json()["tags"] == ["a"]


@pytest.mark.asyncio
async def test_get_task(test_client):
    created = await create_task(test_client, tags=["a"])

    response = await test_client.get(f"{TASKS_URL}/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.asyncio
async def test_get_task_not_found(test_client):
    """Test: GET несуществующей задачи - 404 NOT_FOUND."""
    response = await test_client.get(f"{TASKS_URL}/{MISSING_ID}")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert MISSING_ID in error["message"]


@pytest.mark.asyncio
async def test_list_tasks(test_client):
    """Test: GET /tasks - список, total и фильтр по проекту."""
    await create_task(test_client, title="One", project_id="p1")
    await create_task(test_client, title="Two", project_id="p1")
    await create_task(test_client, title="Three", project_id="p2")

    response = await test_client.get(TASKS_URL, params={"project_id": "p1"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert {t["title"] for t in data["tasks"]} == {"One", "Two"}


@pytest.mark.asyncio
async def test_list_tasks_invalid_limit(test_client):
    response = await test_client.get(TASKS_URL, params={"limit": 0})

    assert response.status_code == 422


# ============================================================================
# TASKS: UPDATE
# ============================================================================


@pytest.mark.asyncio
async def test_update_without_tags_field(test_client):
    """Test: поле tags не передано - теги не меняются."""
    created = await create_task(test_client, tags=["a", "b"])

    response = await test_client.put(f"{TASKS_URL}/{created['id']}", json={"status": "done"})

    assert response.status_code == 200
    assert response.json()["status"] == "done"
    assert response.json()["tags"] == ["a", "b"]


@pytest.mark.asyncio
async def test_update_with_null_tags(test_client):
    """Test: tags: null - то же самое, что поле не передано."""
    created = await create_task(test_client, tags=["a", "b"])

    response = await test_client.put(f"{TASKS_URL}/{created['id']}", json={"tags": None})

    assert response.status_code == 200
    assert response.json()["tags"] == ["a", "b"]


@pytest.mark.asyncio
async def test_update_with_empty_tags(test_client):
    """Test: tags: [] - все теги удаляются."""
    created = await create_task(test_client, tags=["a", "b"])

    response = await test_client.put(f"{TASKS_URL}/{created['id']}", json={"tags": []})

    assert response.status_code == 200
    assert response.json()["tags"] == []


@pytest.mark.asyncio
async def test_update_replaces_tags(test_client):
    """Test: новый список тегов заменяет старый целиком."""
    created = await create_task(test_client, tags=["backend", "urgent"])

    response = await test_client.put(
        f"{TASKS_URL}/{created['id']}", json={"title": "Renamed", "tags": ["urgent", "ops"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Renamed"
    assert data["tags"] == ["urgent", "ops"]


@pytest.mark.asyncio
async def test_update_not_found(test_client):
    response = await test_client.put(f"{TASKS_URL}/{MISSING_ID}", json={"title": "x"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


# ============================================================================
# TASKS: DELETE
# ============================================================================


@pytest.mark.asyncio
async def test_delete_task(test_client):
    """Test: DELETE - 204, затем задача недоступна, теги остаются."""
    created = await create_task(test_client, tags=["keep"])

    response = await test_client.delete(f"{TASKS_URL}/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""

    response = await test_client.get(f"{TASKS_URL}/{created['id']}")
    assert response.status_code == 404

    tags = (await test_client.get(TAGS_URL)).json()
    assert [(t["name"], t["usage_count"]) for t in tags] == [("keep", 0)]


@pytest.mark.asyncio
async def test_delete_task_not_found(test_client):
    response = await test_client.delete(f"{TASKS_URL}/{MISSING_ID}")

    assert response.status_code == 404


# ============================================================================
# TAGS
# ============================================================================


@pytest.mark.asyncio
async def test_list_tags_with_usage(test_client):
    """Test: GET /tags - теги по имени с usage_count."""
    await create_task(test_client, tags=["backend", "urgent"])
    await create_task(test_client, tags=["backend"])

    response = await test_client.get(TAGS_URL)

    assert response.status_code == 200
    assert [(t["name"], t["usage_count"]) for t in response.json()] == [
        ("backend", 2),
        ("urgent", 1),
    ]


@pytest.mark.asyncio
async def test_unused_tags(test_client):
    created = await create_task(test_client, tags=["stay", "drop"])
    await test_client.put(f"{TASKS_URL}/{created['id']}", json={"tags": ["stay"]})

    response = await test_client.get(f"{TAGS_URL}/unused")

    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["drop"]


@pytest.mark.asyncio
async def test_get_tag_and_set_color(test_client):
    """Test: GET /tags/{id} и PATCH цвета."""
    await create_task(test_client, tags=["ui"])
    tag = (await test_client.get(TAGS_URL)).json()[0]

    response = await test_client.patch(f"{TAGS_URL}/{tag['id']}", json={"color": "#10B981"})
    assert response.status_code == 200
    assert response.json()["color"] == "#10B981"

    response = await test_client.get(f"{TAGS_URL}/{tag['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "ui"
    assert response.json()["color"] == "#10B981"
    assert response.json()["usage_count"] == 1


@pytest.mark.asyncio
async def test_set_color_invalid_format(test_client):
    await create_task(test_client, tags=["ui"])
    tag = (await test_client.get(TAGS_URL)).json()[0]

    response = await test_client.patch(f"{TAGS_URL}/{tag['id']}", json={"color": "blue"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_tag_not_found(test_client):
    response = await test_client.get(f"{TAGS_URL}/{MISSING_ID}")
    assert response.status_code == 404

    response = await test_client.patch(f"{TAGS_URL}/{MISSING_ID}", json={"color": "#000000"})
    assert response.status_code == 404


# ============================================================================
# AGENTS
# ============================================================================


async def create_agent(client: AsyncClient, name: str = "claude", **payload) -> dict:
    payload.setdefault("type", "ai")
    response = await client.post(AGENTS_URL, json={"name": name, **payload})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_agent_crud(test_client):
    """Test: POST / GET / PUT / DELETE /agents."""
    agent = await create_agent(test_client, description="Code review")
    assert agent["name"] == "claude"
    assert agent["type"] == "ai"

    response = await test_client.get(f"{AGENTS_URL}/{agent['id']}")
    assert response.status_code == 200
    assert response.json() == agent

    response = await test_client.put(f"{AGENTS_URL}/{agent['id']}", json={"type": "human"})
    assert response.status_code == 200
    assert response.json()["type"] == "human"
    assert response.json()["name"] == "claude"

    response = await test_client.get(AGENTS_URL)
    assert response.json()["total"] == 1

    response = await test_client.delete(f"{AGENTS_URL}/{agent['id']}")
    assert response.status_code == 204
    response = await test_client.get(f"{AGENTS_URL}/{agent['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_agent_duplicate_name(test_client):
    """Test: второе имя 'claude' - 409 CONFLICT."""
    await create_agent(test_client)

    response = await test_client.post(AGENTS_URL, json={"name": "claude", "type": "ai"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_agent_missing_type(test_client):
    response = await test_client.post(AGENTS_URL, json={"name": "nobody"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_task_with_agent(test_client):
    """Test: задача с agent_id возвращает вложенного агента."""
    agent = await create_agent(test_client)

    task = await create_task(test_client, agent_id=agent["id"], tags=["ai"])

    assert task["agent_id"] == agent["id"]
    assert task["agent"]["name"] == "claude"
    assert task["tags"] == ["ai"]


@pytest.mark.asyncio
async def test_task_with_unknown_agent(test_client):
    """Test: несуществующий agent_id - 400 с полем agent_id, задача не создаётся."""
    response = await test_client.post(TASKS_URL, json={"title": "Orphan", "agent_id": MISSING_ID})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["field"] == "agent_id"
    assert (await test_client.get(TASKS_URL)).json()["total"] == 0


@pytest.mark.asyncio
async def test_delete_agent_unassigns_tasks(test_client):
    """Test: после удаления агента задача остаётся, agent_id == null."""
    agent = await create_agent(test_client)
    task = await create_task(test_client, agent_id=agent["id"])

    await test_client.delete(f"{AGENTS_URL}/{agent['id']}")

    response = await test_client.get(f"{TASKS_URL}/{task['id']}")
    assert response.status_code == 200
    assert response.json()["agent_id"] is None
    assert response.json()["agent"] is None


# ============================================================================
# PROJECTS
# ============================================================================


@pytest.mark.asyncio
async def test_project_crud(test_client):
    """Test: POST / GET / PUT / DELETE /projects."""
    agent = await create_agent(test_client)

    response = await test_client.post(
        PROJECTS_URL,
        json={"name": "solo", "directory": "/srv/solo", "agent_id": agent["id"]},
    )
    assert response.status_code == 201
    project = response.json()
    assert project["agent"]["id"] == agent["id"]
    assert project["description"] == ""

    response = await test_client.put(
        f"{PROJECTS_URL}/{project['id']}", json={"description": "Main repo"}
    )
    assert response.status_code == 200
    assert response.json()["description"] == "Main repo"
    assert response.json()["directory"] == "/srv/solo"
    assert response.json()["agent_id"] == agent["id"]

    response = await test_client.get(PROJECTS_URL)
    assert response.json()["total"] == 1
    assert response.json()["projects"][0]["name"] == "solo"

    response = await test_client.delete(f"{PROJECTS_URL}/{project['id']}")
    assert response.status_code == 204
    response = await test_client.get(f"{PROJECTS_URL}/{project['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_project_missing_directory(test_client):
    response = await test_client.post(PROJECTS_URL, json={"name": "solo"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_project_unknown_agent(test_client):
    response = await test_client.post(
        PROJECTS_URL, json={"name": "solo", "directory": "/srv", "agent_id": MISSING_ID}
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["field"] == "agent_id"


@pytest.mark.asyncio
async def test_delete_project_keeps_tasks(test_client):
    """Test: задачи ссылаются на проект без внешнего ключа и переживают его удаление."""
    response = await test_client.post(PROJECTS_URL, json={"name": "tmp", "directory": "/tmp"})
    project = response.json()
    task = await create_task(test_client, project_id=project["id"])

    await test_client.delete(f"{PROJECTS_URL}/{project['id']}")

    response = await test_client.get(f"{TASKS_URL}/{task['id']}")
    assert response.status_code == 200
    assert response.json()["project_id"] == project["id"]


# ============================================================================
# AUTH / SERVICE ENDPOINTS
# ============================================================================


@pytest.mark.asyncio
async def test_missing_api_key(test_client):
    """Test: без X-API-Key - 401."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(TASKS_URL)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_api_key(test_client):
    response = await test_client.get(TASKS_URL, headers={"X-API-Key": "wrong-key"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_request_id_header(test_client):
    """Test: X-Request-ID генерируется или берётся из запроса."""
    response = await test_client.get(TASKS_URL)
    assert response.headers.get("X-Request-ID")

    response = await test_client.get(TASKS_URL, headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"


@pytest.mark.asyncio
async def test_root(test_client):
    response = await test_client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["api_version"] == "v1"
    assert data["endpoints"]["tasks"] == TASKS_URL
    assert data["endpoints"]["agents"] == AGENTS_URL


@pytest.mark.asyncio
async def test_health(test_client, session_factory, monkeypatch):
    """Test: /health проверяет соединение с БД."""
    monkeypatch.setattr(main, "AsyncSessionLocal", session_factory)

    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["checks"]["database"] == "connected"


@pytest.mark.asyncio
async def test_health_database_down(test_client, monkeypatch):
    """Test: БД недоступна - 503 и database=disconnected."""
    broken_engine = create_async_engine("sqlite+aiosqlite:////nonexistent-dir/solo.db")
    monkeypatch.setattr(main, "AsyncSessionLocal", async_sessionmaker(broken_engine))

    response = await test_client.get("/health")
    await broken_engine.dispose()

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "error"
    assert data["checks"]["database"] == "disconnected"
