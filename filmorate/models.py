"""
Data models for Filmorate.

Provides dataclasses for type-safe data handling between the storage
layer, the services and the API.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Mapping, Optional, Set

# Earliest permissible film release date
RELEASE_DATE_FLOOR = date(1895, 12, 28)


def to_date(value) -> Optional[date]:
    """Normalize a DATE column value (SQLite hands back ISO strings)."""
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value)[:10])


@dataclass
class Mpa:
    """Content rating classification (G, PG, PG-13, ...)."""

    id: int
    name: Optional[str] = None


@dataclass
class Genre:
    """Genre reference record."""

    id: int
    name: Optional[str] = None


@dataclass
class Film:
    """Film with its rating, genres and liking user ids."""

    name: str
    release_date: date
    duration: int
    description: Optional[str] = None
    mpa: Optional[Mpa] = None
    id: Optional[int] = None

    # Related data
    genres: List[Genre] = field(default_factory=list)
    likes: Set[int] = field(default_factory=set)

    def to_dict(self) -> dict:
        """Convert base columns to a dictionary for database writes."""
        return {
            "name": self.name,
            "description": self.description,
            "release_date": self.release_date.isoformat(),
            "duration": self.duration,
            "mpa_id": self.mpa.id if self.mpa else None,
        }

    @property
    def genre_ids(self) -> List[int]:
        """Distinct genre ids in first-seen order."""
        return list(dict.fromkeys(g.id for g in self.genres))

    @classmethod
    def from_row(cls, row: Mapping) -> "Film":
        """Create a base Film (no relationships) from a films row."""
        mpa = None
        if row.get("mpa_id") is not None:
            mpa = Mpa(id=row["mpa_id"], name=row.get("mpa_name"))
        return cls(
            id=row["film_id"],
            name=row["name"],
            description=row.get("description"),
            release_date=to_date(row["release_date"]),
            duration=row["duration"],
            mpa=mpa,
        )


@dataclass
class User:
    """User with the ids of their friends."""

    email: str
    login: str
    birthday: date
    name: Optional[str] = None
    id: Optional[int] = None

    # Related data
    friends: Set[int] = field(default_factory=set)

    def to_dict(self) -> dict:
        """Convert base columns to a dictionary for database writes."""
        return {
            "email": self.email,
            "login": self.login,
            "name": self.name,
            "birthday": self.birthday.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Mapping) -> "User":
        """Create a base User (no friends) from a users row."""
        return cls(
            id=row["user_id"],
            email=row["email"],
            login=row["login"],
            name=row.get("name"),
            birthday=to_date(row["birthday"]),
        )
