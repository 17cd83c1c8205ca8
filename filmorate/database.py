"""
Database manager for Filmorate.

Handles the relational side of storage:
- Connection management with SQLAlchemy
- Transaction scopes for multi-statement writes
- Table creation and reference data seeding
- Status and teardown helpers used by the CLI
"""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from .config import Config
from .utils import setup_logger

MPA_RATINGS = [
    (1, "G"),
    (2, "PG"),
    (3, "PG-13"),
    (4, "R"),
    (5, "NC-17"),
]

GENRES = [
    (1, "Комедия"),
    (2, "Драма"),
    (3, "Мультфильм"),
    (4, "Триллер"),
    (5, "Документальный"),
    (6, "Боевик"),
]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Handles engine setup and schema management.

    Responsibilities:
    - Connection management with SQLAlchemy
    - Transaction management
    - Creating, seeding and dropping the schema
    """

    # Creation order; join tables reference the base tables
    REFERENCE_TABLES = ["mpa", "genres"]
    ENTITY_TABLES = ["films", "users"]
    RELATION_TABLES = ["films_genres", "films_likes", "friendship"]

    def __init__(self, config: Config):
        self.config = config
        self.engine = self._create_engine()
        self.logger = setup_logger("database", config.log_dir, config.log_level)

    @property
    def all_tables(self) -> List[str]:
        return self.REFERENCE_TABLES + self.ENTITY_TABLES + self.RELATION_TABLES

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine; pooled for MySQL, shared connection for in-memory SQLite."""
        url = self.config.database_url
        if not self.config.is_sqlite():
            return create_engine(
                url,
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,
                pool_recycle=3600,
            )

        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Open a connection inside a transaction; commits on success, rolls back on error."""
        with self.engine.begin() as conn:
            yield conn

    def _execute(self, query: str, params: dict = None) -> list:
        """Execute a query and return results."""
        with self.engine.connect() as conn:
            result = conn.execute(text(query), params or {})
            conn.commit()
            return result.fetchall() if result.returns_rows else []

    def _execute_many(self, query: str, params_list: List[dict]) -> int:
        """Execute a query for multiple parameter sets in one transaction."""
        if not params_list:
            return 0
        with self.engine.begin() as conn:
            conn.execute(text(query), params_list)
        return len(params_list)

    # ============ SCHEMA ============

    def table_exists(self, table_name: str) -> bool:
        """Check if a specific table exists."""
        return inspect(self.engine).has_table(table_name)

    def get_missing_tables(self) -> List[str]:
        """Get required tables that don't exist, in creation order."""
        return [t for t in self.all_tables if not self.table_exists(t)]

    def check_and_create_tables(self) -> dict:
        """
        Check which tables exist, create any that are missing and seed
        the reference tables.

        Returns:
            {
                "existing": List[str],
                "created": List[str],
                "seeded": Dict[str, int],
                "all_present": bool
            }
        """
        result = {"existing": [], "created": [], "seeded": {}, "all_present": False}

        for table in self.all_tables:
            if self.table_exists(table):
                result["existing"].append(table)
            elif self._create_table(table):
                result["created"].append(table)

        result["all_present"] = not self.get_missing_tables()
        if result["all_present"]:
            result["seeded"] = self.seed_reference_data()

        return result

    def _id_column(self, name: str) -> str:
        if self.dialect == "mysql":
            return f"{name} INTEGER AUTO_INCREMENT PRIMARY KEY"
        return f"{name} INTEGER PRIMARY KEY AUTOINCREMENT"

    def _table_options(self) -> str:
        if self.dialect == "mysql":
            return " ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci"
        return ""

    def _create_table(self, table: str) -> bool:
        """Create a specific table."""
        sql_templates = {
            "mpa": """
                CREATE TABLE IF NOT EXISTS mpa (
                    mpa_id INTEGER PRIMARY KEY,
                    name VARCHAR(50) NOT NULL
                )
            """,
            "genres": """
                CREATE TABLE IF NOT EXISTS genres (
                    genre_id INTEGER PRIMARY KEY,
                    name VARCHAR(50) NOT NULL
                )
            """,
            "films": f"""
                CREATE TABLE IF NOT EXISTS films (
                    {self._id_column("film_id")},
                    name VARCHAR(255) NOT NULL,
                    description VARCHAR(200),
                    release_date DATE NOT NULL,
                    duration INTEGER NOT NULL,
                    mpa_id INTEGER,
                    FOREIGN KEY (mpa_id) REFERENCES mpa (mpa_id)
                )
            """,
            "users": f"""
                CREATE TABLE IF NOT EXISTS users (
                    {self._id_column("user_id")},
                    name VARCHAR(255),
                    login VARCHAR(255) NOT NULL,
                    email VARCHAR(255) NOT NULL,
                    birthday DATE NOT NULL
                )
            """,
            "films_genres": """
                CREATE TABLE IF NOT EXISTS films_genres (
                    film_id INTEGER NOT NULL,
                    genre_id INTEGER NOT NULL,
                    PRIMARY KEY (film_id, genre_id),
                    FOREIGN KEY (film_id) REFERENCES films (film_id) ON DELETE CASCADE,
                    FOREIGN KEY (genre_id) REFERENCES genres (genre_id) ON DELETE CASCADE
                )
            """,
            "films_likes": """
                CREATE TABLE IF NOT EXISTS films_likes (
                    film_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    PRIMARY KEY (film_id, user_id),
                    FOREIGN KEY (film_id) REFERENCES films (film_id) ON DELETE CASCADE,
                    FOREIGN KEY (user_id) REFERENCES users (user_id) ON DELETE CASCADE
                )
            """,
            "friendship": """
                CREATE TABLE IF NOT EXISTS friendship (
                    user_id INTEGER NOT NULL,
                    friend_id INTEGER NOT NULL,
                    PRIMARY KEY (user_id, friend_id),
                    FOREIGN KEY (user_id) REFERENCES users (user_id) ON DELETE CASCADE,
                    FOREIGN KEY (friend_id) REFERENCES users (user_id) ON DELETE CASCADE
                )
            """,
        }

        try:
            self._execute(sql_templates[table].rstrip() + self._table_options())
            self.logger.info(f"Created table: {table}")
            return True
        except Exception as e:
            self.logger.error(f"Error creating table {table}: {e}")
            return False

    def seed_reference_data(self) -> Dict[str, int]:
        """
        Fill the mpa and genres tables when they are empty.

        Returns:
            Number of rows inserted per table.
        """
        seeded = {}
        for table, id_column, rows in (
            ("mpa", "mpa_id", MPA_RATINGS),
            ("genres", "genre_id", GENRES),
        ):
            if self.get_table_count(table) > 0:
                seeded[table] = 0
                continue
            seeded[table] = self._execute_many(
                f"INSERT INTO {table} ({id_column}, name) VALUES (:id, :name)",
                [{"id": row_id, "name": name} for row_id, name in rows],
            )
            self.logger.info(f"Seeded {seeded[table]} rows into {table}")
        return seeded

    def drop_tables(self) -> dict:
        """
        Drop every Filmorate table, join tables first.

        Returns:
            {"dropped": List[str], "errors": List[str]}
        """
        result = {"dropped": [], "errors": []}

        for table in reversed(self.all_tables):
            try:
                if self.table_exists(table):
                    self._execute(f"DROP TABLE {table}")
                    result["dropped"].append(table)
                    self.logger.info(f"Dropped table: {table}")
            except Exception as e:
                result["errors"].append(f"{table}: {str(e)}")
                self.logger.error(f"Error dropping table {table}: {e}")

        return result

    # ============ STATUS ============

    def get_table_count(self, table: str) -> int:
        """Get row count of a table."""
        result = self._execute(f"SELECT COUNT(*) AS cnt FROM {table}")
        return result[0][0]

    def get_status(self) -> dict:
        """Get current database status."""
        missing = self.get_missing_tables()
        counts: List[Tuple[str, int]] = [
            (table, self.get_table_count(table))
            for table in self.all_tables
            if table not in missing
        ]
        return {
            "dialect": self.dialect,
            "counts": dict(counts),
            "missing_tables": missing,
            "all_tables_exist": not missing,
        }
