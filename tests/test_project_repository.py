import uuid
from datetime import date

import pytest

from fakes import utc
from taskboard.errors import ConflictError, InvalidArgumentError, NotFoundError
from taskboard.models import ProjectUpdate, TaskStatus


pytestmark = pytest.mark.anyio


async def test_create_project_sets_timestamps(project_repo, project_draft):
    project_id = await project_repo.create_project(project_draft(description="First release"))

    project = await project_repo.get_project(project_id)
    assert project.name == "Alpha"
    assert project.description == "First release"
    assert project.created_at == project.updated_at


async def test_create_project_duplicate_name_conflicts(project_repo, project_draft, db):
    await project_repo.create_project(project_draft(name="Alpha"))

    with pytest.raises(ConflictError, match='project with the name "Alpha"'):
        await project_repo.create_project(project_draft(name="Alpha"))

    assert len(db.projects.documents) == 1


async def test_list_projects(project_repo, project_draft):
    await project_repo.create_project(project_draft(name="Alpha"))
    await project_repo.create_project(project_draft(name="Beta"))

    assert sorted(p.name for p in await project_repo.list_projects()) == ["Alpha", "Beta"]


async def test_list_projects_sorted(project_repo, project_draft):
    await project_repo.create_project(project_draft(name="Gamma", end=utc(2024, 9, 1)))
    await project_repo.create_project(project_draft(name="Alpha", end=utc(2024, 3, 1)))
    await project_repo.create_project(project_draft(name="Beta", end=utc(2024, 6, 1)))

    assert [p.name for p in await project_repo.list_projects_sorted("endDate", "desc")] == ["Gamma", "Beta", "Alpha"]
    assert [p.name for p in await project_repo.list_projects_sorted("name")] == ["Alpha", "Beta", "Gamma"]


async def test_list_projects_sorted_rejects_task_only_field(project_repo):
    with pytest.raises(InvalidArgumentError):
        await project_repo.list_projects_sorted("dueDate", "asc")


async def test_update_project_is_sparse(project_repo, project_draft):
    project_id = await project_repo.create_project(project_draft(description="Keep me"))
    before = await project_repo.get_project(project_id)

    assert await project_repo.update_project(project_id, ProjectUpdate(end_date=utc(2024, 12, 31))) == 1

    after = await project_repo.get_project(project_id)
    assert after.end_date == utc(2024, 12, 31)
    assert after.description == "Keep me"
    assert after.name == before.name
    assert after.updated_at >= before.updated_at


async def test_update_project_name_collision_conflicts(project_repo, project_draft):
    project_id = await project_repo.create_project(project_draft(name="Alpha"))
    await project_repo.create_project(project_draft(name="Beta"))

    with pytest.raises(ConflictError):
        await project_repo.update_project(project_id, ProjectUpdate(name="Beta"))


async def test_update_project_rename(project_repo, project_draft):
    project_id = await project_repo.create_project(project_draft(name="Alpha"))

    await project_repo.update_project(project_id, ProjectUpdate(name="Alpha 2"))

    assert (await project_repo.get_project(project_id)).name == "Alpha 2"


async def test_update_project_invalid_id(project_repo):
    with pytest.raises(InvalidArgumentError, match="Invalid Project ID"):
        await project_repo.update_project("xyz", ProjectUpdate(name="Beta"))


async def test_delete_project_unlinks_tasks(project_repo, task_repo, project_draft, task_draft, db):
    project_id = await project_repo.create_project(project_draft())
    other_id = await project_repo.create_project(project_draft(name="Other"))
    first = await task_repo.create_task(task_draft(name="First"))
    second = await task_repo.create_task(task_draft(name="Second"))
    elsewhere = await task_repo.create_task(task_draft(name="Elsewhere"))
    await task_repo.assign_task_to_project(first, project_id)
    await task_repo.assign_task_to_project(second, project_id)
    await task_repo.assign_task_to_project(elsewhere, other_id)

    assert await project_repo.delete_project(project_id) == 1

    assert (await task_repo.get_task(first)).project_id is None
    assert (await task_repo.get_task(second)).project_id is None
    assert (await task_repo.get_task(elsewhere)).project_id == other_id
    assert [p.id for p in await project_repo.list_projects()] == [other_id]
    assert db.transactions == 1


async def test_delete_missing_project_touches_nothing(project_repo, task_repo, task_draft, db, monkeypatch):
    await task_repo.create_task(task_draft())

    async def fail(*args, **kwargs):
        raise AssertionError("cascade must not run")

    monkeypatch.setattr(db.tasks, "update_many", fail)

    assert await project_repo.delete_project(uuid.uuid4()) == 0


async def test_delete_project_rolls_back_when_unlink_fails(project_repo, task_repo, project_draft, task_draft, db, monkeypatch):
    project_id = await project_repo.create_project(project_draft())
    task_id = await task_repo.create_task(task_draft())
    await task_repo.assign_task_to_project(task_id, project_id)

    async def fail(*args, **kwargs):
        raise ConnectionError("connection lost")

    monkeypatch.setattr(db.tasks, "update_many", fail)

    with pytest.raises(ConnectionError):
        await project_repo.delete_project(project_id)

    assert (await project_repo.get_project(project_id)).id == project_id
    assert (await task_repo.get_task(task_id)).project_id == project_id


async def test_delete_project_invalid_id(project_repo):
    with pytest.raises(InvalidArgumentError):
        await project_repo.delete_project("not-a-uuid")


async def test_get_missing_project(project_repo):
    with pytest.raises(NotFoundError):
        await project_repo.get_project(uuid.uuid4())


async def test_projects_with_tasks_due_on(project_repo, task_repo, project_draft, task_draft):
    busy = await project_repo.create_project(project_draft(name="Busy"))
    idle = await project_repo.create_project(project_draft(name="Idle"))
    due_today = await task_repo.create_task(task_draft(name="Due today", due=utc(2024, 1, 10, 23, 59)))
    due_later = await task_repo.create_task(task_draft(name="Due later", due=utc(2024, 1, 11)))
    await task_repo.create_task(task_draft(name="Unassigned", due=utc(2024, 1, 10, 8)))
    await task_repo.assign_task_to_project(due_today, busy)
    await task_repo.assign_task_to_project(due_later, idle)

    projects = await project_repo.list_projects_with_tasks_due_on(date(2024, 1, 10))
    assert [p.id for p in projects] == [busy]
    assert await project_repo.list_projects_with_tasks_due_on(date(2024, 2, 1)) == []


async def test_scenario_project_lifecycle(project_repo, task_repo, project_draft, task_draft):
    p1 = await project_repo.create_project(project_draft(name="Alpha", start=utc(2024, 1, 1), end=utc(2024, 6, 1)))
    t1 = await task_repo.create_task(task_draft(name="Design", start=utc(2024, 1, 2), due=utc(2024, 1, 10)))
    assert (await task_repo.get_task(t1)).status is TaskStatus.TODO

    assert await task_repo.assign_task_to_project(t1, p1) == 1
    assert (await task_repo.get_task(t1)).project_id == p1

    assert await task_repo.set_task_status(t1, "DONE") == 1
    assert (await task_repo.get_task(t1)).done_date is not None

    assert await project_repo.delete_project(p1) == 1
    assert (await task_repo.get_task(t1)).project_id is None
