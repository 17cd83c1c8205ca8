"""
Storage backends for Filmorate.

``build_storage`` picks the relational or in-memory implementation of
the same repository and relationship-store interfaces from the
configured ``storage_backend``.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import Config
from ..database import DatabaseManager
from ..models import Film, Genre, Mpa, User
from .base import Catalog, EntityRepository, RelationStore
from .db import build_db_storage
from .memory import build_memory_storage


@dataclass
class Storage:
    """Everything the services read from and write to."""

    films: EntityRepository[Film]
    users: EntityRepository[User]
    genres: Catalog[Genre]
    mpa: Catalog[Mpa]
    film_genres: RelationStore
    likes: RelationStore
    friendships: RelationStore


def build_storage(config: Config, db: Optional[DatabaseManager] = None) -> Storage:
    """
    Build the storage selected by ``config.storage_backend``.

    Args:
        config: Application configuration
        db: Existing DatabaseManager to reuse for the relational backend

    Returns:
        Storage bundle. For the relational backend, missing tables are
        created and reference data seeded.
    """
    if config.storage_backend == "memory":
        return Storage(**build_memory_storage())

    db = db or DatabaseManager(config)
    db.check_and_create_tables()
    return Storage(**build_db_storage(db))


__all__ = [
    "Catalog",
    "EntityRepository",
    "RelationStore",
    "Storage",
    "build_storage",
]
