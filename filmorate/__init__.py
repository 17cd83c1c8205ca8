"""
Filmorate - films, users, likes and friendships over a relational store.

This package provides:
- Film and User repositories with relational and in-memory backends
- Join-table relationship stores for genres, likes and friendships
- Services that assemble complete entity views and rank popular films
- Schema setup and an admin CLI
"""

from .config import Config
from .database import DatabaseManager
from .exceptions import FilmorateError, NotFoundError, ValidationError
from .models import Film, Genre, Mpa, User, RELEASE_DATE_FLOOR
from .service import FilmService, ReferenceService, UserService
from .storage import Storage, build_storage

__version__ = "1.0.0"
__all__ = [
    "Config",
    "DatabaseManager",
    "FilmorateError",
    "NotFoundError",
    "ValidationError",
    "Film",
    "Genre",
    "Mpa",
    "User",
    "RELEASE_DATE_FLOOR",
    "FilmService",
    "ReferenceService",
    "UserService",
    "Storage",
    "build_storage",
]
