"""
Dependency injection for the API.

Provides dependencies for configuration, storage and the services
built on top of it.
"""

from functools import lru_cache

from fastapi import Depends

from filmorate.config import Config
from filmorate.service import FilmService, ReferenceService, UserService
from filmorate.storage import Storage, build_storage


@lru_cache()
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()


@lru_cache()
def get_storage() -> Storage:
    """Get cached storage for the configured backend."""
    config = get_config()
    return build_storage(config)


def get_film_service(storage: Storage = Depends(get_storage)) -> FilmService:
    return FilmService(storage)


def get_user_service(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage)


def get_reference_service(storage: Storage = Depends(get_storage)) -> ReferenceService:
    return ReferenceService(storage)
