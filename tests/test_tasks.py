"""Task CRUD and the submit/approve transitions."""

import uuid

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from octoops.models.project import Task, task_dependencies
from octoops.models.user import User
from octoops.services.tasks import TaskService


async def _create_task(client, **fields):
    payload = {"title": "Write docs", **fields}
    response = await client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def _list_tasks(client, **params):
    response = await client.get("/api/tasks", params=params)
    assert response.status_code == 200
    return response.json()


async def test_create_task_defaults(client, owner, project):
    task = await _create_task(client, projectId=project["id"], createdBy=owner["id"])

    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["projectId"] == project["id"]
    assert task["createdBy"] == {
        "id": owner["id"],
        "name": owner["name"],
        "email": owner["email"],
    }
    assert task["assignee"] is None
    assert task["assigneeName"] is None
    assert task["dependencies"] == []


async def test_create_task_requires_title(client):
    response = await client.post("/api/tasks", json={"description": "no title"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("title:")


async def test_assignee_name_is_a_snapshot(client, owner, session_factory):
    task = await _create_task(client, assignee=owner["id"])
    assert task["assigneeName"] == "Olivia Owner"
    assert task["assignee"]["name"] == "Olivia Owner"

    async with session_factory() as session:
        await session.execute(
            update(User).where(User.id == uuid.UUID(owner["id"])).values(name="Olivia Renamed")
        )
        await session.commit()

    [listed] = await _list_tasks(client)
    assert listed["assigneeName"] == "Olivia Owner"
    assert listed["assignee"]["name"] == "Olivia Renamed"


async def test_update_assignee_refreshes_snapshot(client, owner):
    login = await client.post("/api/auth/login", json={"inviteCode": "qa"})
    qa = login.json()["user"]
    task = await _create_task(client, assignee=owner["id"])

    response = await client.put(f"/api/tasks/{task['id']}", json={"assignee": qa["id"]})

    assert response.status_code == 200
    assert response.json()["assigneeName"] == "QA Specialist"
    assert response.json()["assignee"]["id"] == qa["id"]


async def test_update_merges_fields(client):
    task = await _create_task(client, description="first draft", priority="high")

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"status": "in-progress", "title": None},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "in-progress"
    assert body["title"] == "Write docs"
    assert body["description"] == "first draft"
    assert body["priority"] == "high"


async def test_update_unknown_task(client):
    response = await client.put(f"/api/tasks/{uuid.uuid4()}", json={"status": "done"})

    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


async def test_list_tasks_filters_by_project_newest_first(client, project):
    first = await _create_task(client, title="First", projectId=project["id"])
    second = await _create_task(client, title="Second", projectId=project["id"])
    await _create_task(client, title="Elsewhere")

    scoped = await _list_tasks(client, projectId=project["id"])
    assert [task["id"] for task in scoped] == [second["id"], first["id"]]

    everything = await _list_tasks(client)
    assert len(everything) == 3


async def test_dependencies_are_populated(client):
    base = await _create_task(client, title="Schema")
    task = await _create_task(client, title="API", dependencies=[base["id"]])

    assert [dep["id"] for dep in task["dependencies"]] == [base["id"]]
    assert task["dependencies"][0]["title"] == "Schema"


async def test_update_dependencies_drops_self_reference(client):
    base = await _create_task(client, title="Schema")
    task = await _create_task(client, title="API")

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"dependencies": [task["id"], base["id"]]},
    )

    assert response.status_code == 200
    assert [dep["id"] for dep in response.json()["dependencies"]] == [base["id"]]


async def test_submit_then_approve(client):
    task = await _create_task(client)

    submitted = await client.post(f"/api/tasks/{task['id']}/submit")
    assert submitted.status_code == 200
    assert submitted.json()["status"] == "in-review"

    approved = await client.post(f"/api/tasks/{task['id']}/approve")
    assert approved.status_code == 200
    assert approved.json()["status"] == "done"


async def test_transitions_unguarded_by_default(client):
    task = await _create_task(client)

    response = await client.post(f"/api/tasks/{task['id']}/approve")

    assert response.status_code == 200
    assert response.json()["status"] == "done"


async def test_transition_guard(client, settings, monkeypatch):
    monkeypatch.setattr(settings, "enforce_task_transitions", True)
    task = await _create_task(client)

    response = await client.post(f"/api/tasks/{task['id']}/approve")

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot approve a task with status 'todo'"}
    [listed] = await _list_tasks(client)
    assert listed["status"] == "todo"

    submitted = await client.post(f"/api/tasks/{task['id']}/submit")
    assert submitted.json()["status"] == "in-review"
    resubmit = await client.post(f"/api/tasks/{task['id']}/submit")
    assert resubmit.status_code == 400


async def test_transition_unknown_task_changes_nothing(client):
    task = await _create_task(client)

    for action in ("submit", "approve"):
        response = await client.post(f"/api/tasks/{uuid.uuid4()}/{action}")
        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}

    [listed] = await _list_tasks(client)
    assert listed["id"] == task["id"]
    assert listed["status"] == "todo"


async def test_delete_task(client):
    task = await _create_task(client)

    response = await client.delete(f"/api/tasks/{task['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}
    assert await _list_tasks(client) == []

    again = await client.delete(f"/api/tasks/{task['id']}")
    assert again.status_code == 404


async def test_delete_removes_dependency_links(db):
    service = TaskService(db)
    schema = await service.create_task({"title": "Schema"})
    api = await service.create_task({"title": "API", "dependencies": [schema.id]})
    ui = await service.create_task({"title": "UI", "dependencies": [api.id]})

    await service.delete_task(api.id)

    links = await db.scalar(select(func.count()).select_from(task_dependencies))
    assert links == 0

    ui = await service.get_task(ui.id)
    assert ui.dependencies == []
    schema = await service.get_task(schema.id)
    assert schema.dependents == []


async def test_delete_keeps_unrelated_links(db):
    service = TaskService(db)
    schema = await service.create_task({"title": "Schema"})
    api = await service.create_task({"title": "API", "dependencies": [schema.id]})
    docs = await service.create_task({"title": "Docs"})

    await service.delete_task(docs.id)

    api = await service.get_task(api.id)
    assert [dep.id for dep in api.dependencies] == [schema.id]
    remaining = await db.scalar(select(func.count()).select_from(Task))
    assert remaining == 2


async def test_store_rejects_unknown_status(db):
    with pytest.raises(IntegrityError):
        await TaskService(db).create_task({"title": "Odd", "status": "blocked"})


async def test_submitted_task_lists_with_dependencies(client):
    base = await _create_task(client, title="Schema")
    task = await _create_task(client, title="API", dependencies=[base["id"]])

    submitted = await client.post(f"/api/tasks/{task['id']}/submit")
    assert submitted.status_code == 200
    assert [dep["id"] for dep in submitted.json()["dependencies"]] == [base["id"]]

    listed = {item["id"]: item for item in await _list_tasks(client)}
    assert listed[task["id"]]["status"] == "in-review"
    assert [dep["id"] for dep in listed[task["id"]]["dependencies"]] == [base["id"]]
    assert listed[base["id"]]["dependencies"] == []


async def test_create_with_unknown_references(client, owner):
    missing = str(uuid.uuid4())

    for field, message in (
        ("assignee", "User not found"),
        ("createdBy", "User not found"),
        ("projectId", "Project not found"),
    ):
        response = await client.post("/api/tasks", json={"title": "Orphan", field: missing})
        assert response.status_code == 404, field
        assert response.json() == {"error": message}

    assert await _list_tasks(client) == []


async def test_update_with_unknown_assignee_changes_nothing(client, owner):
    task = await _create_task(client, assignee=owner["id"])

    response = await client.put(
        f"/api/tasks/{task['id']}", json={"assignee": str(uuid.uuid4()), "title": "Renamed"}
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    [listed] = await _list_tasks(client)
    assert listed["title"] == "Write docs"
    assert listed["assignee"]["id"] == owner["id"]
