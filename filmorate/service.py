"""
Aggregation services.

Combine base rows from the repositories with their relationship sets
into complete Film and User views, and apply the write-time rules:

- release dates before 1895-12-28 are rejected
- a blank user name falls back to the login
- friendships are mutual; duplicate likes and friendships are rejected
- removing a like or friendship that does not exist is a no-op

Writes persist the base row first, then replace relationship sets, then
re-read the merged view so callers see exactly what was stored.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Set

from .exceptions import NotFoundError, ValidationError
from .models import RELEASE_DATE_FLOOR, Film, Genre, Mpa, User
from .storage import Storage

logger = logging.getLogger("filmorate.service")


def _require(source, item_id: int) -> None:
    """Raise NotFoundError unless the repository or catalog holds ``item_id``."""
    if not source.exists(item_id):
        raise NotFoundError(source.resource, item_id)


class FilmService:
    """Films with their genres and likes."""

    def __init__(self, storage: Storage):
        self.storage = storage

    # ============ READ ============

    def list_films(self) -> List[Film]:
        """All films, fully assembled, in id order."""
        films = self.storage.films.list()
        genres = self.storage.film_genres.get_all()
        likes = self.storage.likes.get_all()
        return self._assemble(films, genres, likes)

    def get_film(self, film_id: int) -> Film:
        """One film; raises NotFoundError if absent."""
        film = self.storage.films.get_by_id(film_id)
        genres = {film_id: self.storage.film_genres.get_for_owner(film_id)}
        likes = {film_id: self.storage.likes.get_for_owner(film_id)}
        return self._assemble([film], genres, likes)[0]

    def most_popular(self, count: int) -> List[Film]:
        """
        Up to ``count`` films ranked by number of likes, most liked first.

        Ties keep id order. Films nobody liked fill the remaining slots in
        id order, so with no likes at all this is the first ``count`` films.
        """
        if count < 1:
            raise ValidationError("count must be positive")

        ranked = self.storage.likes.rank_owners(count)
        if len(ranked) < count:
            seen = set(ranked)
            for film_id in self.storage.films.list_ids():
                if len(ranked) >= count:
                    break
                if film_id not in seen:
                    ranked.append(film_id)

        films = self.storage.films.get_many(ranked)
        ids = [f.id for f in films]
        genres = self.storage.film_genres.get_for_owners(ids)
        likes = self.storage.likes.get_for_owners(ids)
        return self._assemble(films, genres, likes)

    def _assemble(
        self,
        films: List[Film],
        genres: Dict[int, Set[int]],
        likes: Dict[int, Set[int]],
    ) -> List[Film]:
        catalog = self.storage.genres.as_map() if any(genres.values()) else {}
        assembled = []
        for film in films:
            film_genres = [
                Genre(id=g, name=catalog[g].name if g in catalog else None)
                for g in sorted(genres.get(film.id, set()))
            ]
            assembled.append(
                replace(film, genres=film_genres, likes=set(likes.get(film.id, set())))
            )
        return assembled

    # ============ WRITE ============

    def create_film(self, film: Film) -> Film:
        """Store a new film and its genres; returns the stored view."""
        self._validate(film)
        created = self.storage.films.create(film)
        self.storage.film_genres.replace_all(created.id, film.genre_ids)
        logger.info(f"Film {created.id} created: {created.name}")
        return self.get_film(created.id)

    def update_film(self, film: Film) -> Film:
        """Replace a film and its genre set; raises NotFoundError if absent."""
        self._validate(film)
        updated = self.storage.films.update(film)
        self.storage.film_genres.replace_all(updated.id, film.genre_ids)
        logger.info(f"Film {updated.id} updated")
        return self.get_film(updated.id)

    def delete_film(self, film_id: int) -> None:
        """Delete a film along with its likes and genre rows."""
        _require(self.storage.films, film_id)
        self.storage.likes.delete_all_for_owner(film_id)
        self.storage.film_genres.delete_all_for_owner(film_id)
        self.storage.films.delete(film_id)
        logger.info(f"Film {film_id} deleted")

    def add_like(self, film_id: int, user_id: int) -> None:
        self._require_film_and_user(film_id, user_id)
        self.storage.likes.add(film_id, user_id)
        logger.info(f"User {user_id} liked film {film_id}")

    def remove_like(self, film_id: int, user_id: int) -> None:
        self._require_film_and_user(film_id, user_id)
        self.storage.likes.remove(film_id, user_id)
        logger.info(f"User {user_id} removed like from film {film_id}")

    def _require_film_and_user(self, film_id: int, user_id: int) -> None:
        _require(self.storage.films, film_id)
        _require(self.storage.users, user_id)

    def _validate(self, film: Film) -> None:
        if film.release_date < RELEASE_DATE_FLOOR:
            raise ValidationError(
                f"Release date {film.release_date.isoformat()} is before "
                f"{RELEASE_DATE_FLOOR.isoformat()}"
            )
        if film.mpa is not None:
            _require(self.storage.mpa, film.mpa.id)
        for genre_id in film.genre_ids:
            _require(self.storage.genres, genre_id)


class UserService:
    """Users and their mutual friendships."""

    def __init__(self, storage: Storage):
        self.storage = storage

    # ============ READ ============

    def list_users(self) -> List[User]:
        users = self.storage.users.list()
        friends = self.storage.friendships.get_all()
        return self._assemble(users, friends)

    def get_user(self, user_id: int) -> User:
        """One user; raises NotFoundError if absent."""
        user = self.storage.users.get_by_id(user_id)
        friends = {user_id: self.storage.friendships.get_for_owner(user_id)}
        return self._assemble([user], friends)[0]

    def get_friends(self, user_id: int) -> List[User]:
        """Friends of ``user_id`` ordered by id."""
        self._require_user(user_id)
        return self._users_by_ids(sorted(self.storage.friendships.get_for_owner(user_id)))

    def get_common_friends(self, user_id: int, other_id: int) -> List[User]:
        """Users who are friends with both, excluding the two themselves."""
        self._require_user(user_id)
        self._require_user(other_id)
        friends = self.storage.friendships.get_for_owners([user_id, other_id])
        common = (friends[user_id] & friends[other_id]) - {user_id, other_id}
        return self._users_by_ids(sorted(common))

    def _users_by_ids(self, user_ids: List[int]) -> List[User]:
        users = self.storage.users.get_many(user_ids)
        friends = self.storage.friendships.get_for_owners([u.id for u in users])
        return self._assemble(users, friends)

    def _assemble(self, users: List[User], friends: Dict[int, Set[int]]) -> List[User]:
        return [replace(u, friends=set(friends.get(u.id, set()))) for u in users]

    # ============ WRITE ============

    def create_user(self, user: User) -> User:
        created = self.storage.users.create(self._with_default_name(user))
        logger.info(f"User {created.id} created: {created.login}")
        return self.get_user(created.id)

    def update_user(self, user: User) -> User:
        """Replace a user's base record; raises NotFoundError if absent."""
        updated = self.storage.users.update(self._with_default_name(user))
        logger.info(f"User {updated.id} updated")
        return self.get_user(updated.id)

    def delete_user(self, user_id: int) -> None:
        """Delete a user with their friendships and likes."""
        self._require_user(user_id)
        self.storage.friendships.delete_all_for_owner(user_id)
        self.storage.likes.delete_all_for_related(user_id)
        self.storage.users.delete(user_id)
        logger.info(f"User {user_id} deleted")

    def add_friend(self, user_id: int, friend_id: int) -> None:
        self._require_pair(user_id, friend_id)
        self.storage.friendships.add(user_id, friend_id)
        logger.info(f"Users {user_id} and {friend_id} are now friends")

    def remove_friend(self, user_id: int, friend_id: int) -> None:
        self._require_pair(user_id, friend_id)
        self.storage.friendships.remove(user_id, friend_id)
        logger.info(f"Users {user_id} and {friend_id} are no longer friends")

    def _require_pair(self, user_id: int, friend_id: int) -> None:
        self._require_user(user_id)
        self._require_user(friend_id)
        if user_id == friend_id:
            raise ValidationError(f"User {user_id} cannot befriend themselves")

    def _require_user(self, user_id: int) -> None:
        _require(self.storage.users, user_id)

    @staticmethod
    def _with_default_name(user: User) -> User:
        if user.name is None or not user.name.strip():
            return replace(user, name=user.login)
        return user


class ReferenceService:
    """Read-only genres and MPA ratings."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def list_genres(self) -> List[Genre]:
        return self.storage.genres.list()

    def get_genre(self, genre_id: int) -> Genre:
        return self.storage.genres.get_by_id(genre_id)

    def list_mpa(self) -> List[Mpa]:
        return self.storage.mpa.list()

    def get_mpa(self, mpa_id: int) -> Mpa:
        return self.storage.mpa.get_by_id(mpa_id)
