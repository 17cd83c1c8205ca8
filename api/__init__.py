"""
Filmorate REST API.

This module provides a FastAPI-based REST API for Filmorate: films,
users, likes, friendships and the genre and MPA catalogs.
"""

from api.main import app

__all__ = ["app"]
