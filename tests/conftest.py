"""
Shared fixtures for Filmorate tests.

Provides configuration, both storage backends, services and an API
client wired to a fresh store.
"""

import pytest
from datetime import date
from typing import Optional

from fastapi.testclient import TestClient

from filmorate.config import Config
from filmorate.database import DatabaseManager
from filmorate.models import Film, Genre, Mpa, User
from filmorate.service import FilmService, ReferenceService, UserService
from filmorate.storage import Storage, build_storage


# =============================================================================
# SAMPLE DATA
# =============================================================================

def create_sample_film(
    name: str = "Matrix",
    release_date: Optional[date] = None,
    duration: int = 136,
    mpa_id: Optional[int] = 4,
    genre_ids: Optional[list] = None,
    film_id: Optional[int] = None,
) -> Film:
    """Create a sample Film for testing."""
    return Film(
        id=film_id,
        name=name,
        description=f"About {name}.",
        release_date=release_date or date(1999, 3, 31),
        duration=duration,
        mpa=Mpa(id=mpa_id) if mpa_id else None,
        genres=[Genre(id=g) for g in (genre_ids or [])],
    )


def create_sample_user(
    login: str = "neo",
    name: Optional[str] = None,
    email: Optional[str] = None,
    birthday: Optional[date] = None,
    user_id: Optional[int] = None,
) -> User:
    """Create a sample User for testing."""
    return User(
        id=user_id,
        email=email or f"{login}@example.com",
        login=login,
        name=name,
        birthday=birthday or date(1990, 5, 17),
    )


def film_payload(**overrides) -> dict:
    """JSON body for POST /films."""
    payload = {
        "name": "Matrix",
        "description": "A hacker learns the truth about his world.",
        "release_date": "1999-03-31",
        "duration": 136,
        "mpa": {"id": 4},
        "genres": [],
    }
    payload.update(overrides)
    return payload


def user_payload(login: str = "neo", **overrides) -> dict:
    """JSON body for POST /users."""
    payload = {
        "email": f"{login}@example.com",
        "login": login,
        "name": login.title(),
        "birthday": "1990-05-17",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def config(tmp_path):
    """Configuration pointing at an in-memory SQLite database."""
    return Config(
        storage_backend="db",
        database_url="sqlite://",
        project_dir=tmp_path,
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def db(config):
    """DatabaseManager with all tables created and seeded."""
    manager = DatabaseManager(config)
    manager.check_and_create_tables()
    yield manager
    manager.engine.dispose()


@pytest.fixture
def memory_storage() -> Storage:
    return build_storage(Config(storage_backend="memory"))


@pytest.fixture
def db_storage(config, db) -> Storage:
    return build_storage(config, db)


@pytest.fixture(params=["memory", "db"])
def storage(request) -> Storage:
    """Each test using this fixture runs once per backend."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def film_service(storage) -> FilmService:
    return FilmService(storage)


@pytest.fixture
def user_service(storage) -> UserService:
    return UserService(storage)


@pytest.fixture
def reference_service(storage) -> ReferenceService:
    return ReferenceService(storage)


@pytest.fixture
def api_client(db_storage):
    """Provide FastAPI test client backed by a fresh in-memory database."""
    from api.main import app
    from api import dependencies

    # Clear any cached config/storage from previous runs
    dependencies.get_config.cache_clear()
    dependencies.get_storage.cache_clear()

    def get_test_storage():
        return db_storage

    app.dependency_overrides[dependencies.get_storage] = get_test_storage

    with TestClient(app) as client:
        yield client

    # Clean up overrides
    app.dependency_overrides.clear()
