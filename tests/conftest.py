import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from testcontainers.postgres import PostgresContainer

from eduverse.domain.roles import UserRole
from eduverse.infrastructure.db.session import Base, build_engine, get_db
from eduverse.main import app
from tests.helpers.factories import create_user


class FakeRedisClient:
    """In-memory stand-in covering the Redis calls made by the cache and lock helpers."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}

    def ping(self) -> bool:
        return True

    def get(self, key: str) -> str | None:
        return self.store.get(key)

    def setex(self, key: str, _ttl: int, value: str) -> bool:
        self.store[key] = value
        return True

    def set(self, key: str, value: str, nx: bool = False, ex: int | None = None) -> bool | None:
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    def eval(self, _script: str, _numkeys: int, key: str, token: str) -> int:
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


def run_migrations(database_url: str) -> None:
    from eduverse.config import settings

    os.environ["DATABASE_URL"] = database_url
    settings.database_url = database_url
    alembic_config = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    command.upgrade(alembic_config, "head")


@pytest.fixture(scope="session")
def database_url(tmp_path_factory):
    if os.environ.get("TEST_USE_POSTGRES") == "1":
        with PostgresContainer("postgres:16-alpine") as postgres:
            yield postgres.get_connection_url().replace("postgresql://", "postgresql+psycopg2://", 1)
        return
    yield f"sqlite:///{tmp_path_factory.mktemp('db') / 'eduverse_test.db'}"


@pytest.fixture(scope="session")
def engine(database_url):
    engine = build_engine(database_url)
    if engine.dialect.name == "postgresql":
        with engine.begin() as connection:
            connection.execute(text("DROP SCHEMA public CASCADE"))
            connection.execute(text("CREATE SCHEMA public"))
    run_migrations(database_url=database_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(autouse=True)
def clean_database(engine):
    tables = [table.name for table in reversed(Base.metadata.sorted_tables)]
    with engine.begin() as connection:
        if engine.dialect.name == "postgresql":
            quoted_tables = ", ".join(f'"{table}"' for table in tables)
            connection.execute(text(f"TRUNCATE TABLE {quoted_tables} RESTART IDENTITY CASCADE"))
        else:
            for table in tables:
                connection.execute(text(f'DELETE FROM "{table}"'))


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeRedisClient()
    monkeypatch.setattr("eduverse.infrastructure.cache.cache_service.get_redis_client", lambda: fake)
    monkeypatch.setattr("eduverse.interfaces.api.v1.routes.ping.get_redis_client", lambda: fake)
    return fake


@pytest.fixture
def db_session(engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_users(db_session):
    return {
        "admin": create_user(db_session, "Admin One", "admin@example.com", UserRole.admin, password="admin123"),
        "accountant": create_user(
            db_session, "Robert Ledger", "accountant@example.com", UserRole.accountant, password="accountant123"
        ),
        "teacher": create_user(db_session, "Sarah Teacher", "teacher@example.com", UserRole.teacher, password="teacher123"),
        "staff": create_user(db_session, "John Staff", "staff@example.com", UserRole.staff, password="staff123"),
        "student": create_user(db_session, "Emma Wilson", "student@example.com", UserRole.student, password="student123"),
        "other_student": create_user(
            db_session, "Liam Smith", "liam@example.com", UserRole.student, password="student123"
        ),
    }
