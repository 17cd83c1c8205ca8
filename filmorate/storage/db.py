"""
Relational storage backend.

All statements are parameterized ``text()`` SQL run through the
DatabaseManager engine. Multi-statement writes share one transaction.
"""

import logging
from abc import abstractmethod
from typing import Callable, Dict, Iterable, List, Set

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from ..database import DatabaseManager
from ..exceptions import NotFoundError, ValidationError
from ..models import Film, Genre, Mpa, User
from .base import Catalog, EntityRepository, RelationStore, T

logger = logging.getLogger("filmorate.storage")


class DbEntityRepository(EntityRepository[T]):
    """CRUD over one table with a store-generated integer key."""

    table: str = ""
    id_column: str = ""
    select_sql: str = ""

    def __init__(self, db: DatabaseManager):
        self.db = db

    @abstractmethod
    def _from_row(self, row) -> T:
        """Entity for one row of ``select_sql``."""

    def _values(self, entity: T) -> dict:
        return entity.to_dict()

    def list(self) -> List[T]:
        with self.db.engine.connect() as conn:
            result = conn.execute(text(f"{self.select_sql} ORDER BY {self.id_column}"))
            return [self._from_row(row) for row in result.mappings()]

    def list_ids(self) -> List[int]:
        rows = self.db._execute(
            f"SELECT {self.id_column} FROM {self.table} ORDER BY {self.id_column}"
        )
        return [row[0] for row in rows]

    def get_by_id(self, entity_id: int) -> T:
        with self.db.engine.connect() as conn:
            result = conn.execute(
                text(f"{self.select_sql} WHERE {self.id_column} = :id"),
                {"id": entity_id}
            )
            row = result.mappings().fetchone()
        if not row:
            raise NotFoundError(self.resource, entity_id)
        return self._from_row(row)

    def get_many(self, entity_ids: Iterable[int]) -> List[T]:
        ids = list(dict.fromkeys(entity_ids))
        if not ids:
            return []
        stmt = text(f"{self.select_sql} WHERE {self.id_column} IN :ids").bindparams(
            bindparam("ids", expanding=True)
        )
        with self.db.engine.connect() as conn:
            rows = {
                row[self.id_column]: self._from_row(row)
                for row in conn.execute(stmt, {"ids": ids}).mappings()
            }
        return [rows[i] for i in ids if i in rows]

    def create(self, entity: T) -> T:
        values = self._values(entity)
        columns = ", ".join(values.keys())
        placeholders = ", ".join(f":{k}" for k in values.keys())
        with self.db.begin() as conn:
            result = conn.execute(
                text(f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})"),
                values
            )
            new_id = result.lastrowid
        logger.debug(f"Inserted {self.table} row {new_id}")
        return self.get_by_id(new_id)

    def update(self, entity: T) -> T:
        values = self._values(entity)
        set_clause = ", ".join(f"{k} = :{k}" for k in values.keys())
        values["id"] = entity.id
        with self.db.begin() as conn:
            exists = conn.execute(
                text(f"SELECT 1 FROM {self.table} WHERE {self.id_column} = :id"),
                {"id": entity.id}
            ).fetchone()
            if not exists:
                raise NotFoundError(self.resource, entity.id)
            conn.execute(
                text(f"UPDATE {self.table} SET {set_clause} WHERE {self.id_column} = :id"),
                values
            )
        return self.get_by_id(entity.id)

    def delete(self, entity_id: int) -> None:
        with self.db.begin() as conn:
            result = conn.execute(
                text(f"DELETE FROM {self.table} WHERE {self.id_column} = :id"),
                {"id": entity_id}
            )
            if result.rowcount == 0:
                raise NotFoundError(self.resource, entity_id)

    def exists(self, entity_id: int) -> bool:
        result = self.db._execute(
            f"SELECT 1 FROM {self.table} WHERE {self.id_column} = :id LIMIT 1",
            {"id": entity_id}
        )
        return len(result) > 0


class DbFilmRepository(DbEntityRepository[Film]):
    resource = "Film"
    table = "films"
    id_column = "film_id"
    select_sql = (
        "SELECT f.film_id, f.name, f.description, f.release_date, f.duration, "
        "f.mpa_id, m.name AS mpa_name "
        "FROM films AS f LEFT JOIN mpa AS m ON f.mpa_id = m.mpa_id"
    )

    def _from_row(self, row) -> Film:
        return Film.from_row(row)


class DbUserRepository(DbEntityRepository[User]):
    resource = "User"
    table = "users"
    id_column = "user_id"
    select_sql = "SELECT user_id, name, login, email, birthday FROM users"

    def _from_row(self, row) -> User:
        return User.from_row(row)


class DbCatalog(Catalog[T]):
    """Reference table with ``<id_column>`` and ``name`` columns."""

    def __init__(self, db: DatabaseManager, table: str, id_column: str,
                 factory: Callable[..., T], resource: str):
        self.db = db
        self.table = table
        self.id_column = id_column
        self.factory = factory
        self.resource = resource

    def list(self) -> List[T]:
        rows = self.db._execute(
            f"SELECT {self.id_column}, name FROM {self.table} ORDER BY {self.id_column}"
        )
        return [self.factory(id=row[0], name=row[1]) for row in rows]

    def get_by_id(self, item_id: int) -> T:
        rows = self.db._execute(
            f"SELECT {self.id_column}, name FROM {self.table} WHERE {self.id_column} = :id",
            {"id": item_id}
        )
        if not rows:
            raise NotFoundError(self.resource, item_id)
        return self.factory(id=rows[0][0], name=rows[0][1])

    def exists(self, item_id: int) -> bool:
        rows = self.db._execute(
            f"SELECT 1 FROM {self.table} WHERE {self.id_column} = :id",
            {"id": item_id}
        )
        return len(rows) > 0


class DbRelationStore(RelationStore):
    """Join table ``table(owner_column, related_column)``."""

    def __init__(self, db: DatabaseManager, table: str, owner_column: str,
                 related_column: str, duplicate_message: str, symmetric: bool = False):
        super().__init__(duplicate_message, symmetric)
        self.db = db
        self.table = table
        self.owner_column = owner_column
        self.related_column = related_column

    def _group(self, rows) -> Dict[int, Set[int]]:
        grouped: Dict[int, Set[int]] = {}
        for owner_id, related_id in rows:
            grouped.setdefault(owner_id, set()).add(related_id)
        return grouped

    def get_for_owner(self, owner_id: int) -> Set[int]:
        rows = self.db._execute(
            f"SELECT {self.related_column} FROM {self.table} WHERE {self.owner_column} = :owner_id",
            {"owner_id": owner_id}
        )
        return {row[0] for row in rows}

    def get_for_owners(self, owner_ids: Iterable[int]) -> Dict[int, Set[int]]:
        ids = list(dict.fromkeys(owner_ids))
        result: Dict[int, Set[int]] = {owner_id: set() for owner_id in ids}
        if not ids:
            return result
        stmt = text(
            f"SELECT {self.owner_column}, {self.related_column} FROM {self.table} "
            f"WHERE {self.owner_column} IN :ids"
        ).bindparams(bindparam("ids", expanding=True))
        with self.db.engine.connect() as conn:
            rows = conn.execute(stmt, {"ids": ids}).fetchall()
        for owner_id, related in self._group(rows).items():
            result[owner_id] = related
        return result

    def get_all(self) -> Dict[int, Set[int]]:
        rows = self.db._execute(
            f"SELECT {self.owner_column}, {self.related_column} FROM {self.table}"
        )
        return self._group(rows)

    def _contains(self, conn: Connection, owner_id: int, related_id: int) -> bool:
        count = conn.execute(
            text(
                f"SELECT COUNT(*) FROM {self.table} "
                f"WHERE {self.owner_column} = :owner_id AND {self.related_column} = :related_id"
            ),
            {"owner_id": owner_id, "related_id": related_id}
        ).scalar()
        return count > 0

    def _insert(self, conn: Connection, pairs: List[tuple]) -> None:
        if not pairs:
            return
        conn.execute(
            text(
                f"INSERT INTO {self.table} ({self.owner_column}, {self.related_column}) "
                f"VALUES (:owner_id, :related_id)"
            ),
            [{"owner_id": owner_id, "related_id": related_id} for owner_id, related_id in pairs]
        )

    def _delete_pair(self, conn: Connection, owner_id: int, related_id: int) -> None:
        conn.execute(
            text(
                f"DELETE FROM {self.table} "
                f"WHERE {self.owner_column} = :owner_id AND {self.related_column} = :related_id"
            ),
            {"owner_id": owner_id, "related_id": related_id}
        )

    def _delete_where(self, conn: Connection, column: str, value: int) -> None:
        conn.execute(
            text(f"DELETE FROM {self.table} WHERE {column} = :value"),
            {"value": value}
        )

    def contains(self, owner_id: int, related_id: int) -> bool:
        with self.db.engine.connect() as conn:
            return self._contains(conn, owner_id, related_id)

    def add(self, owner_id: int, related_id: int) -> None:
        with self.db.begin() as conn:
            if self._contains(conn, owner_id, related_id):
                raise ValidationError(self._duplicate_error_message(owner_id, related_id))
            pairs = [(owner_id, related_id)]
            if self.symmetric and not self._contains(conn, related_id, owner_id):
                pairs.append((related_id, owner_id))
            try:
                self._insert(conn, pairs)
            except IntegrityError:
                # A concurrent add of the same pair won the primary key
                raise ValidationError(self._duplicate_error_message(owner_id, related_id))

    def remove(self, owner_id: int, related_id: int) -> None:
        with self.db.begin() as conn:
            self._delete_pair(conn, owner_id, related_id)
            if self.symmetric:
                self._delete_pair(conn, related_id, owner_id)

    def replace_all(self, owner_id: int, related_ids: Iterable[int]) -> None:
        related = list(dict.fromkeys(related_ids))
        pairs = [(owner_id, related_id) for related_id in related]
        if self.symmetric:
            pairs += [(related_id, owner_id) for related_id in related if related_id != owner_id]
        with self.db.begin() as conn:
            self._delete_where(conn, self.owner_column, owner_id)
            if self.symmetric:
                self._delete_where(conn, self.related_column, owner_id)
            self._insert(conn, pairs)
        logger.debug(f"Replaced {self.table} rows of {owner_id}: {related}")

    def delete_all_for_owner(self, owner_id: int) -> None:
        with self.db.begin() as conn:
            self._delete_where(conn, self.owner_column, owner_id)
            if self.symmetric:
                self._delete_where(conn, self.related_column, owner_id)

    def delete_all_for_related(self, related_id: int) -> None:
        with self.db.begin() as conn:
            self._delete_where(conn, self.related_column, related_id)
            if self.symmetric:
                self._delete_where(conn, self.owner_column, related_id)

    def rank_owners(self, limit: int) -> List[int]:
        rows = self.db._execute(
            f"SELECT {self.owner_column}, COUNT(*) AS cnt FROM {self.table} "
            f"GROUP BY {self.owner_column} "
            f"ORDER BY cnt DESC, {self.owner_column} ASC "
            f"LIMIT :limit",
            {"limit": limit}
        )
        return [row[0] for row in rows]


def build_db_storage(db: DatabaseManager) -> dict:
    """Repositories, catalogs and stores for the relational backend."""
    return {
        "films": DbFilmRepository(db),
        "users": DbUserRepository(db),
        "genres": DbCatalog(db, "genres", "genre_id", Genre, "Genre"),
        "mpa": DbCatalog(db, "mpa", "mpa_id", Mpa, "Mpa"),
        "film_genres": DbRelationStore(
            db, "films_genres", "film_id", "genre_id",
            duplicate_message="Film {owner} already has genre {related}",
        ),
        "likes": DbRelationStore(
            db, "films_likes", "film_id", "user_id",
            duplicate_message="User {related} already likes film {owner}",
        ),
        "friendships": DbRelationStore(
            db, "friendship", "user_id", "friend_id",
            duplicate_message="User {related} is already a friend of user {owner}",
            symmetric=True,
        ),
    }
