from collections.abc import Iterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Imported for their tables: create_all only sees registered models
import inkwell.contacts  # noqa: F401
import inkwell.content  # noqa: F401
import inkwell.stats  # noqa: F401
from inkwell.authentication import Identity, SessionStore, UserState
from inkwell.core.config import InkwellSettings
from inkwell.db import db as db_module
from inkwell.web import create_app

DATABASE_URL = "sqlite+aiosqlite:///:memory:"  # in-memory DB for tests
ADMIN_USER = "admin"
ADMIN_PASSWORD = "correct horse battery staple"


@pytest_asyncio.fixture(scope="function")
async def init_test_db():
    """Fresh in-memory database with every table created."""
    engine, factory = db_module.init_db(DATABASE_URL, echo=False)
    await db_module.create_all(engine)

    yield factory

    await db_module.close_db(engine)


@pytest_asyncio.fixture()
async def db_session(init_test_db):
    """Provide a database session for tests."""
    async with init_test_db() as session:
        yield session


@pytest.fixture
def anonymous() -> Identity:
    return Identity()


@pytest.fixture
def admin() -> Identity:
    return Identity(user_state=UserState.ADMIN, session_id=1)


@pytest.fixture
def user() -> Identity:
    return Identity(user_state=UserState.USER, session_id=2)


@pytest.fixture
def settings(tmp_path) -> InkwellSettings:
    return InkwellSettings(
        _env_file=None,
        DEBUG=True,
        DATABASE_URL=DATABASE_URL,
        ADMIN_USER=ADMIN_USER,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        MEDIA_ROOT=str(tmp_path / "media"),
    )


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore(lock_timeout=0.5)


@pytest.fixture
def app(settings: InkwellSettings, tmp_path) -> FastAPI:
    return create_app(
        settings,
        static_directory=tmp_path / "static",
        configure_logging=False,
    )


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """TestClient with the application lifespan (database) running."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_session_id(client: TestClient) -> int:
    """Log `client` in as the configured admin and return the session id."""
    response = client.post(
        "/api/login", data={"user": ADMIN_USER, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return int(response.cookies["auth"])


@pytest.fixture
def admin_client(client: TestClient, admin_session_id: int) -> TestClient:  # noqa: ARG001
    return client
