import os

import pytest
from aws_xray_sdk import global_sdk_config
from aws_xray_sdk.core import xray_recorder

# X-Ray stays disabled unless a test asks for the xray_segments fixture.
os.environ.setdefault("XRAY_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402

from fakes import InMemoryDatabase, RecordingEmitter, utc  # noqa: E402
from taskboard.api.deps import get_database  # noqa: E402
from taskboard.config import Settings  # noqa: E402
from taskboard.main import create_app  # noqa: E402
from taskboard.models import ProjectCreate, TaskCreate  # noqa: E402
from taskboard.repositories import ProjectRepository, TaskRepository  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def task_repo(db):
    return TaskRepository(db)


@pytest.fixture
def project_repo(db):
    return ProjectRepository(db)


@pytest.fixture
def task_draft():
    def make(name="Design", start=utc(2024, 1, 2), due=utc(2024, 1, 10), **extra):
        return TaskCreate(name=name, start_date=start, due_date=due, **extra)
    return make


@pytest.fixture
def project_draft():
    def make(name="Alpha", start=utc(2024, 1, 1), end=utc(2024, 6, 1), description=None):
        return ProjectCreate(name=name, description=description, start_date=start, end_date=end)
    return make


@pytest.fixture
def app(db):
    application = create_app(Settings(xray_enabled=False, log_level="WARNING"))
    application.dependency_overrides[get_database] = lambda: db
    return application


@pytest.fixture
def client(app):
    # Not used as a context manager: lifespan (PostgreSQL pool) is never started.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def xray_segments():
    """Enables the X-Ray SDK for one test and collects the emitted segments."""
    emitter = RecordingEmitter()
    context, original_emitter = xray_recorder.context, xray_recorder.emitter
    global_sdk_config.set_sdk_enabled(True)
    xray_recorder.configure(emitter=emitter)

    yield emitter.segments

    global_sdk_config.set_sdk_enabled(False)
    xray_recorder.configure(context=context, emitter=original_emitter)
