"""
Storage interfaces shared by the relational and in-memory backends.

Repositories hold base rows only; relationship collections on the
entities they return are always empty. Relationship stores keep the
many-to-many join rows and hand back plain id sets.
"""

from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterable, List, Set, TypeVar

T = TypeVar("T")


class EntityRepository(ABC, Generic[T]):
    """CRUD over one entity table (films or users)."""

    resource: str = "Entity"

    @abstractmethod
    def list(self) -> List[T]:
        """All base rows in id order."""

    @abstractmethod
    def list_ids(self) -> List[int]:
        """All ids in ascending order."""

    @abstractmethod
    def get_by_id(self, entity_id: int) -> T:
        """Base row for ``entity_id``; raises NotFoundError if absent."""

    @abstractmethod
    def get_many(self, entity_ids: Iterable[int]) -> List[T]:
        """Base rows in the order of ``entity_ids``; unknown ids are skipped."""

    @abstractmethod
    def create(self, entity: T) -> T:
        """Insert ``entity`` and return the stored row with its new id."""

    @abstractmethod
    def update(self, entity: T) -> T:
        """Replace the row for ``entity.id``; raises NotFoundError if absent."""

    @abstractmethod
    def delete(self, entity_id: int) -> None:
        """Delete the row; raises NotFoundError if absent."""

    @abstractmethod
    def exists(self, entity_id: int) -> bool:
        """Whether a row with ``entity_id`` exists."""


class Catalog(ABC, Generic[T]):
    """Read-only reference table (genres, mpa)."""

    resource: str = "Reference"

    @abstractmethod
    def list(self) -> List[T]:
        """All records ordered by id."""

    @abstractmethod
    def get_by_id(self, item_id: int) -> T:
        """Record for ``item_id``; raises NotFoundError if absent."""

    def exists(self, item_id: int) -> bool:
        return any(item.id == item_id for item in self.list())

    def as_map(self) -> Dict[int, T]:
        return {item.id: item for item in self.list()}


class RelationStore(ABC):
    """
    Many-to-many join table between an owner and related ids.

    A symmetric store (friendship) keeps every edge in both directions:
    adding ``(a, b)`` also stores ``(b, a)`` and removals act on both.
    Duplicate inserts are rejected with ValidationError using
    ``duplicate_message``, formatted with ``owner`` and ``related``.
    """

    def __init__(self, duplicate_message: str, symmetric: bool = False):
        self.duplicate_message = duplicate_message
        self.symmetric = symmetric

    @abstractmethod
    def get_for_owner(self, owner_id: int) -> Set[int]:
        """Related ids of one owner."""

    @abstractmethod
    def get_for_owners(self, owner_ids: Iterable[int]) -> Dict[int, Set[int]]:
        """Related ids per owner; every requested owner is present."""

    @abstractmethod
    def get_all(self) -> Dict[int, Set[int]]:
        """Related ids of every owner that has at least one row."""

    @abstractmethod
    def contains(self, owner_id: int, related_id: int) -> bool:
        """Whether the ``(owner_id, related_id)`` row exists."""

    @abstractmethod
    def add(self, owner_id: int, related_id: int) -> None:
        """Insert one relationship; raises ValidationError on duplicates."""

    @abstractmethod
    def remove(self, owner_id: int, related_id: int) -> None:
        """Delete one relationship; absent rows are ignored."""

    @abstractmethod
    def replace_all(self, owner_id: int, related_ids: Iterable[int]) -> None:
        """Atomically swap the owner's related set for ``related_ids``."""

    @abstractmethod
    def delete_all_for_owner(self, owner_id: int) -> None:
        """Delete every row owned by ``owner_id``."""

    @abstractmethod
    def delete_all_for_related(self, related_id: int) -> None:
        """Delete every row pointing at ``related_id``."""

    @abstractmethod
    def rank_owners(self, limit: int) -> List[int]:
        """Owners with rows, by row count descending then owner id ascending."""

    def _duplicate_error_message(self, owner_id: int, related_id: int) -> str:
        return self.duplicate_message.format(owner=owner_id, related=related_id)
