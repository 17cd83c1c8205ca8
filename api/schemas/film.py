"""
Film-related Pydantic schemas.

Requests reference the MPA rating and genres by id; any ``name`` sent
along is ignored and the stored catalog name is returned instead.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from api.schemas.genre import GenreResponse, MpaResponse
from filmorate.models import Film, Genre, Mpa


class RefById(BaseModel):
    """Reference to a catalog entry."""

    id: int = Field(..., ge=1)
    name: Optional[str] = None


class FilmBase(BaseModel):
    """Fields shared by film create and update requests."""

    name: str = Field(..., description="Film title")
    description: Optional[str] = Field(None, max_length=200)
    release_date: date = Field(..., description="Not earlier than 1895-12-28")
    duration: int = Field(..., gt=0, description="Duration in minutes")
    mpa: RefById
    genres: Optional[List[RefById]] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    def to_film(self, film_id: Optional[int] = None) -> Film:
        return Film(
            id=film_id,
            name=self.name,
            description=self.description,
            release_date=self.release_date,
            duration=self.duration,
            mpa=Mpa(id=self.mpa.id),
            genres=[Genre(id=g.id) for g in self.genres or []],
        )


class FilmCreate(FilmBase):
    """Request to create a film."""


class FilmUpdate(FilmBase):
    """Request to replace an existing film, identified by ``id``."""

    id: int = Field(..., description="Film ID")

    def to_film(self, film_id: Optional[int] = None) -> Film:
        return super().to_film(self.id)


class FilmResponse(BaseModel):
    """Film with its rating, genres and the ids of users who liked it."""

    id: int
    name: str
    description: Optional[str] = None
    release_date: date
    duration: int
    mpa: Optional[MpaResponse] = None
    genres: List[GenreResponse] = []
    likes: List[int] = []

    @classmethod
    def from_film(cls, film: Film) -> "FilmResponse":
        return cls(
            id=film.id,
            name=film.name,
            description=film.description,
            release_date=film.release_date,
            duration=film.duration,
            mpa=MpaResponse.from_mpa(film.mpa) if film.mpa else None,
            genres=[GenreResponse.from_genre(g) for g in film.genres],
            likes=sorted(film.likes),
        )
