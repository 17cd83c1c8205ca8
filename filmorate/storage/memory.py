"""
In-memory storage backend.

Process-local maps keyed by id with a monotonic counter. Every read
returns a fresh copy, so callers never share a mutable object with the
store.
"""

from copy import deepcopy
from dataclasses import replace
from abc import abstractmethod
from threading import Lock, RLock
from typing import Dict, Iterable, List, Set

from ..database import GENRES, MPA_RATINGS
from ..exceptions import NotFoundError, ValidationError
from ..models import Film, Genre, Mpa, User
from .base import Catalog, EntityRepository, RelationStore, T


class InMemoryEntityRepository(EntityRepository[T]):
    """Arena of base rows keyed by id."""

    def __init__(self):
        self._rows: Dict[int, T] = {}
        self._last_id = 0
        self._lock = Lock()

    @abstractmethod
    def _base(self, entity: T) -> T:
        """Copy of ``entity`` with relationship collections cleared."""

    def _view(self, entity: T) -> T:
        return self._base(entity)

    def list(self) -> List[T]:
        with self._lock:
            return [self._view(self._rows[i]) for i in sorted(self._rows)]

    def list_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._rows)

    def get_by_id(self, entity_id: int) -> T:
        with self._lock:
            if entity_id not in self._rows:
                raise NotFoundError(self.resource, entity_id)
            return self._view(self._rows[entity_id])

    def get_many(self, entity_ids: Iterable[int]) -> List[T]:
        with self._lock:
            return [
                self._view(self._rows[i])
                for i in dict.fromkeys(entity_ids)
                if i in self._rows
            ]

    def create(self, entity: T) -> T:
        with self._lock:
            self._last_id += 1
            stored = replace(self._base(entity), id=self._last_id)
            self._rows[stored.id] = stored
            return self._view(stored)

    def update(self, entity: T) -> T:
        with self._lock:
            if entity.id not in self._rows:
                raise NotFoundError(self.resource, entity.id)
            stored = self._base(entity)
            self._rows[stored.id] = stored
            return self._view(stored)

    def delete(self, entity_id: int) -> None:
        with self._lock:
            if self._rows.pop(entity_id, None) is None:
                raise NotFoundError(self.resource, entity_id)

    def exists(self, entity_id: int) -> bool:
        with self._lock:
            return entity_id in self._rows


class InMemoryFilmRepository(InMemoryEntityRepository[Film]):
    resource = "Film"

    def __init__(self, mpa: Catalog[Mpa]):
        super().__init__()
        self.mpa = mpa

    def _base(self, film: Film) -> Film:
        mpa = Mpa(id=film.mpa.id) if film.mpa else None
        return replace(film, mpa=mpa, genres=[], likes=set())

    def _view(self, film: Film) -> Film:
        view = self._base(film)
        if view.mpa is not None:
            names = self.mpa.as_map()
            if view.mpa.id in names:
                view.mpa.name = names[view.mpa.id].name
        return view


class InMemoryUserRepository(InMemoryEntityRepository[User]):
    resource = "User"

    def _base(self, user: User) -> User:
        return replace(user, friends=set())


class InMemoryCatalog(Catalog[T]):
    """Fixed reference records."""

    def __init__(self, items: Iterable[T], resource: str):
        self._items = {item.id: item for item in items}
        self.resource = resource

    def list(self) -> List[T]:
        return [deepcopy(self._items[i]) for i in sorted(self._items)]

    def get_by_id(self, item_id: int) -> T:
        if item_id not in self._items:
            raise NotFoundError(self.resource, item_id)
        return deepcopy(self._items[item_id])

    def exists(self, item_id: int) -> bool:
        return item_id in self._items


class InMemoryRelationStore(RelationStore):
    """Owner id to related id set."""

    def __init__(self, duplicate_message: str, symmetric: bool = False):
        super().__init__(duplicate_message, symmetric)
        self._edges: Dict[int, Set[int]] = {}
        self._lock = RLock()

    def _link(self, owner_id: int, related_id: int) -> None:
        self._edges.setdefault(owner_id, set()).add(related_id)

    def _unlink(self, owner_id: int, related_id: int) -> None:
        related = self._edges.get(owner_id)
        if related is None:
            return
        related.discard(related_id)
        if not related:
            del self._edges[owner_id]

    def _drop_owner(self, owner_id: int) -> None:
        for related_id in self._edges.pop(owner_id, set()):
            if self.symmetric:
                self._unlink(related_id, owner_id)

    def _drop_related(self, related_id: int) -> None:
        for owner_id in [o for o, rel in self._edges.items() if related_id in rel]:
            self._unlink(owner_id, related_id)

    def get_for_owner(self, owner_id: int) -> Set[int]:
        with self._lock:
            return set(self._edges.get(owner_id, set()))

    def get_for_owners(self, owner_ids: Iterable[int]) -> Dict[int, Set[int]]:
        with self._lock:
            return {
                owner_id: set(self._edges.get(owner_id, set()))
                for owner_id in owner_ids
            }

    def get_all(self) -> Dict[int, Set[int]]:
        with self._lock:
            return {owner_id: set(related) for owner_id, related in self._edges.items()}

    def contains(self, owner_id: int, related_id: int) -> bool:
        with self._lock:
            return related_id in self._edges.get(owner_id, set())

    def add(self, owner_id: int, related_id: int) -> None:
        with self._lock:
            if self.contains(owner_id, related_id):
                raise ValidationError(self._duplicate_error_message(owner_id, related_id))
            self._link(owner_id, related_id)
            if self.symmetric:
                self._link(related_id, owner_id)

    def remove(self, owner_id: int, related_id: int) -> None:
        with self._lock:
            self._unlink(owner_id, related_id)
            if self.symmetric:
                self._unlink(related_id, owner_id)

    def replace_all(self, owner_id: int, related_ids: Iterable[int]) -> None:
        related = list(dict.fromkeys(related_ids))
        with self._lock:
            self._drop_owner(owner_id)
            if self.symmetric:
                self._drop_related(owner_id)
            for related_id in related:
                self._link(owner_id, related_id)
                if self.symmetric and related_id != owner_id:
                    self._link(related_id, owner_id)

    def delete_all_for_owner(self, owner_id: int) -> None:
        with self._lock:
            self._drop_owner(owner_id)
            if self.symmetric:
                self._drop_related(owner_id)

    def delete_all_for_related(self, related_id: int) -> None:
        with self._lock:
            self._drop_related(related_id)
            if self.symmetric:
                self._drop_owner(related_id)

    def rank_owners(self, limit: int) -> List[int]:
        with self._lock:
            ranked = sorted(self._edges.items(), key=lambda item: (-len(item[1]), item[0]))
        return [owner_id for owner_id, _ in ranked[:limit]]


def build_memory_storage() -> dict:
    """Repositories, catalogs and stores for the in-memory backend."""
    mpa = InMemoryCatalog([Mpa(id=i, name=n) for i, n in MPA_RATINGS], "Mpa")
    genres = InMemoryCatalog([Genre(id=i, name=n) for i, n in GENRES], "Genre")
    return {
        "films": InMemoryFilmRepository(mpa),
        "users": InMemoryUserRepository(),
        "genres": genres,
        "mpa": mpa,
        "film_genres": InMemoryRelationStore(
            duplicate_message="Film {owner} already has genre {related}",
        ),
        "likes": InMemoryRelationStore(
            duplicate_message="User {related} already likes film {owner}",
        ),
        "friendships": InMemoryRelationStore(
            duplicate_message="User {related} is already a friend of user {owner}",
            symmetric=True,
        ),
    }
