"""
Command-line interface for Filmorate.

Provides commands for:
- setup: Check and create required tables, seed genres and MPA ratings
- status: Show row counts per table
- popular: Print the most liked films
- drop: Drop all tables
- serve: Run the HTTP API with uvicorn
"""

import argparse
import sys
from typing import Optional

import uvicorn

from .config import Config
from .database import DatabaseManager
from .service import FilmService
from .storage import build_storage
from .utils import (
    ask_yes_no,
    format_count,
    print_banner,
    print_key_values,
    setup_logger,
    shorten,
)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="filmorate",
        description="Filmorate - manage the film and user database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Setup (run first)
  python -m filmorate setup

  # Check status
  python -m filmorate status

  # Top 5 films by likes
  python -m filmorate popular --count 5

  # Drop everything without prompting
  python -m filmorate drop --yes

  # Run the API on API_HOST:API_PORT
  python -m filmorate serve
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "setup",
        help="Check for missing tables, create them and seed reference data",
    )

    subparsers.add_parser(
        "status",
        help="Show current database status",
    )

    popular_parser = subparsers.add_parser(
        "popular",
        help="List the most liked films",
    )
    popular_parser.add_argument(
        "--count",
        type=int,
        help="Number of films to show (default: POPULAR_DEFAULT_COUNT)",
    )

    drop_parser = subparsers.add_parser(
        "drop",
        help="Drop all tables (DANGEROUS)",
    )
    drop_parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip confirmation prompt",
    )

    subparsers.add_parser(
        "serve",
        help="Run the HTTP API (API_HOST, API_PORT, API_DEBUG)",
    )

    return parser


def cmd_setup(db: DatabaseManager) -> int:
    """Run setup command."""
    print_banner("Filmorate Setup")

    result = db.check_and_create_tables()

    print("\nTables:")
    for table in db.all_tables:
        if table in result["existing"]:
            print(f"  {table:<20} EXISTS")
        elif table in result["created"]:
            print(f"  {table:<20} CREATED")
        else:
            print(f"  {table:<20} MISSING")

    for table, count in result["seeded"].items():
        if count:
            print(f"\nSeeded {count} rows into {table}.")

    print(
        f"\nSetup complete! {len(result['created'])} tables created, "
        f"{len(result['existing'])} already existed."
    )

    if result["all_present"]:
        print("All required tables are now present.")
        return 0
    print("WARNING: Some tables are still missing!")
    return 1


def cmd_status(db: DatabaseManager) -> int:
    """Run status command."""
    print_banner("Filmorate Status")

    status = db.get_status()

    rows = {"Database": status["dialect"]}
    for table, count in status["counts"].items():
        rows[table] = format_count(count)
    rows["All tables exist"] = "Yes" if status["all_tables_exist"] else "No"
    print_key_values(rows, title="Database Status")

    if status["missing_tables"]:
        print(f"Missing tables: {', '.join(status['missing_tables'])}")
        print("\nRun 'python -m filmorate setup' to create missing tables.")

    return 0


def cmd_popular(config: Config, db: DatabaseManager, args) -> int:
    """Run popular films command."""
    count = config.popular_default_count if args.count is None else args.count
    print_banner(f"Top {count} Films")

    service = FilmService(build_storage(config, db))
    films = service.most_popular(count)

    if not films:
        print("\nNo films yet.")
        return 0

    print()
    for rank, film in enumerate(films, 1):
        year = film.release_date.year
        mpa = film.mpa.name if film.mpa else "-"
        print(
            f"  {rank:>3}. [{film.id}] {shorten(film.name, 40):<40} "
            f"{year}  {mpa:<6} likes={len(film.likes)}"
        )
    print()
    return 0


def cmd_drop(db: DatabaseManager, args) -> int:
    """Run drop tables command."""
    print_banner("Drop Tables")

    status = db.get_status()
    if not status["counts"]:
        print("No tables to drop.")
        return 0

    print("\nThe following tables will be DROPPED (all data deleted):")
    for table, count in status["counts"].items():
        print(f"  - {table} ({format_count(count)} rows)")

    if not args.yes:
        print("\nThis action CANNOT be undone!")
        try:
            if not ask_yes_no("Drop all tables?"):
                print("Cancelled.")
                return 0
        except (EOFError, KeyboardInterrupt):
            print("\nCancelled.")
            return 0

    result = db.drop_tables()

    print(f"\nDropped {len(result['dropped'])} tables:")
    for table in result["dropped"]:
        print(f"  - {table}")

    if result["errors"]:
        print("\nErrors:")
        for error in result["errors"]:
            print(f"  - {error}")
        return 1

    print("\nDone. Run 'setup' to recreate tables.")
    return 0


def cmd_serve(config: Config) -> int:
    """Run serve command."""
    print_banner("Filmorate API")
    print(f"\nListening on http://{config.api_host}:{config.api_port} (docs at /api/docs)\n")
    uvicorn.run(
        "api.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.api_debug,
        log_level=config.log_level.lower(),
    )
    return 0


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 0

    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nSet DATABASE_URL, or SQL_HOST, SQL_USER, SQL_PASS, SQL_DB in your .env file.")
        return 1

    setup_logger("filmorate", config.log_dir, config.log_level)

    if parsed_args.command == "serve":
        return cmd_serve(config)

    if config.storage_backend != "db":
        print("The CLI manages the relational store; set STORAGE_BACKEND=db.")
        return 1

    try:
        db = DatabaseManager(config)
    except Exception as e:
        print(f"Error connecting to database: {e}")
        return 1

    try:
        if parsed_args.command == "setup":
            return cmd_setup(db)
        elif parsed_args.command == "status":
            return cmd_status(db)
        elif parsed_args.command == "popular":
            return cmd_popular(config, db, parsed_args)
        elif parsed_args.command == "drop":
            return cmd_drop(db, parsed_args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        return 130
    except Exception as e:
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
