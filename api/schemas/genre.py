"""
Genre and MPA rating schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

from filmorate.models import Genre, Mpa


class GenreResponse(BaseModel):
    """Genre tag, by id and name."""

    id: int = Field(..., description="Genre ID")
    name: Optional[str] = None

    @classmethod
    def from_genre(cls, genre: Genre) -> "GenreResponse":
        return cls(id=genre.id, name=genre.name)


class MpaResponse(BaseModel):
    """MPA rating classification, by id and name."""

    id: int = Field(..., description="MPA rating ID")
    name: Optional[str] = None

    @classmethod
    def from_mpa(cls, mpa: Mpa) -> "MpaResponse":
        return cls(id=mpa.id, name=mpa.name)
