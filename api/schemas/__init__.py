"""Pydantic schemas for API request and response validation."""

from api.schemas.common import ErrorResponse, SuccessResponse
from api.schemas.film import FilmCreate, FilmResponse, FilmUpdate, RefById
from api.schemas.genre import GenreResponse, MpaResponse
from api.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    # Common
    "ErrorResponse",
    "SuccessResponse",
    # Film
    "FilmCreate",
    "FilmResponse",
    "FilmUpdate",
    "RefById",
    # Genre / MPA
    "GenreResponse",
    "MpaResponse",
    # User
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
