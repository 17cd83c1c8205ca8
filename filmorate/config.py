"""
Configuration management for Filmorate.

Loads configuration from environment variables and provides
a centralized Config dataclass for all settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

STORAGE_BACKENDS = ("db", "memory")


@dataclass
class Config:
    """Centralized configuration from environment variables."""

    # Storage
    storage_backend: str = "db"
    database_url: str = "sqlite:///filmorate.db"

    # Paths
    project_dir: Path = field(default_factory=Path.cwd)
    log_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")
    log_level: str = "INFO"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_debug: bool = False

    # CORS settings
    allowed_origins: List[str] = field(default_factory=list)

    # Ranking
    popular_default_count: int = 10

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got '{self.storage_backend}'"
            )
        if self.popular_default_count < 1:
            raise ValueError("POPULAR_DEFAULT_COUNT must be >= 1")

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_path: Optional path to .env file. If not provided,
                     looks for .env in the current directory.

        Returns:
            Config instance with loaded values.

        Raises:
            ValueError: If a variable holds an unusable value.
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        storage_backend = os.getenv("STORAGE_BACKEND", "db").lower()

        # An explicit URL wins, then MySQL settings, then a local SQLite file
        database_url = os.getenv("DATABASE_URL", "")
        if not database_url:
            db_user = os.getenv("SQL_USER", "")
            db_name = os.getenv("SQL_DB", "")
            if db_user and db_name:
                database_url = cls.build_mysql_url(
                    host=os.getenv("SQL_HOST", "localhost"),
                    port=int(os.getenv("SQL_PORT", "3306")),
                    user=db_user,
                    password=os.getenv("SQL_PASS", ""),
                    database=db_name,
                )
            else:
                database_url = "sqlite:///filmorate.db"

        project_dir = Path(os.getenv("PROJECT_DIR", Path.cwd()))
        log_dir = Path(os.getenv("LOG_DIR", project_dir / "logs"))
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # API settings
        api_host = os.getenv("API_HOST", "0.0.0.0")
        api_port = int(os.getenv("API_PORT", "8080"))
        api_debug = os.getenv("API_DEBUG", "false").lower() == "true"

        # CORS settings
        origins_str = os.getenv("ALLOWED_ORIGINS", "")
        allowed_origins = [o.strip() for o in origins_str.split(",") if o.strip()]

        popular_default_count = int(os.getenv("POPULAR_DEFAULT_COUNT", "10"))

        return cls(
            storage_backend=storage_backend,
            database_url=database_url,
            project_dir=project_dir,
            log_dir=log_dir,
            log_level=log_level,
            api_host=api_host,
            api_port=api_port,
            api_debug=api_debug,
            allowed_origins=allowed_origins,
            popular_default_count=popular_default_count,
        )

    @staticmethod
    def build_mysql_url(host: str, port: int, user: str, password: str, database: str) -> str:
        """Get SQLAlchemy URL for a MySQL database."""
        return f"mysql+pymysql://{user}:{password}@{host}:{port}/{database}"

    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")
