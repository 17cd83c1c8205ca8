"""
Entity repository and reference catalog tests, run against both backends.
"""

import pytest
from datetime import date

from filmorate.exceptions import NotFoundError
from filmorate.models import Mpa
from filmorate.storage.db import DbEntityRepository
from filmorate.storage.memory import InMemoryEntityRepository

from conftest import create_sample_film, create_sample_user


class TestFilmRepository:
    """Base film rows."""

    def test_create_assigns_increasing_ids(self, storage):
        first = storage.films.create(create_sample_film("First"))
        second = storage.films.create(create_sample_film("Second"))

        assert first.id is not None
        assert second.id > first.id

    def test_create_then_get(self, storage):
        created = storage.films.create(create_sample_film("Matrix", mpa_id=4))

        film = storage.films.get_by_id(created.id)

        assert film.name == "Matrix"
        assert film.release_date == date(1999, 3, 31)
        assert film.duration == 136
        assert film.mpa == Mpa(id=4, name="R")
        assert film.genres == []
        assert film.likes == set()

    def test_film_without_mpa(self, storage):
        created = storage.films.create(create_sample_film("Unrated", mpa_id=None))
        assert storage.films.get_by_id(created.id).mpa is None

    def test_get_missing_raises(self, storage):
        with pytest.raises(NotFoundError) as exc_info:
            storage.films.get_by_id(999)

        assert exc_info.value.resource == "Film"
        assert exc_info.value.identifier == 999

    def test_returned_objects_are_copies(self, storage):
        created = storage.films.create(create_sample_film("Matrix"))

        film = storage.films.get_by_id(created.id)
        film.name = "Changed"

        assert storage.films.get_by_id(created.id).name == "Matrix"

    def test_update(self, storage):
        created = storage.films.create(create_sample_film("Matrix", mpa_id=4))

        updated = storage.films.update(
            create_sample_film("Matrix Reloaded", date(2003, 5, 15), 138, 3, film_id=created.id)
        )

        assert updated.id == created.id
        assert updated.name == "Matrix Reloaded"
        assert updated.mpa.name == "PG-13"
        assert storage.films.get_by_id(created.id).duration == 138

    def test_update_missing_raises(self, storage):
        with pytest.raises(NotFoundError):
            storage.films.update(create_sample_film(film_id=42))

    def test_delete(self, storage):
        created = storage.films.create(create_sample_film())

        storage.films.delete(created.id)

        assert not storage.films.exists(created.id)
        with pytest.raises(NotFoundError):
            storage.films.delete(created.id)

    def test_list_and_ids_in_id_order(self, storage):
        ids = [storage.films.create(create_sample_film(f"Film {i}")).id for i in range(3)]

        assert [f.id for f in storage.films.list()] == ids
        assert storage.films.list_ids() == ids

    def test_get_many_keeps_requested_order(self, storage):
        ids = [storage.films.create(create_sample_film(f"Film {i}")).id for i in range(3)]

        films = storage.films.get_many([ids[2], 999, ids[0], ids[2]])

        assert [f.id for f in films] == [ids[2], ids[0]]

    def test_get_many_empty(self, storage):
        assert storage.films.get_many([]) == []


class TestUserRepository:
    """Base user rows."""

    def test_create_then_get(self, storage):
        created = storage.users.create(create_sample_user("neo", name="Thomas"))

        user = storage.users.get_by_id(created.id)

        assert user.login == "neo"
        assert user.name == "Thomas"
        assert user.email == "neo@example.com"
        assert user.birthday == date(1990, 5, 17)
        assert user.friends == set()

    def test_ids_not_reused_after_delete(self, storage):
        first = storage.users.create(create_sample_user("one"))
        storage.users.delete(first.id)

        second = storage.users.create(create_sample_user("two"))

        assert second.id > first.id

    def test_exists(self, storage):
        created = storage.users.create(create_sample_user())
        assert storage.users.exists(created.id)
        assert not storage.users.exists(created.id + 100)


class TestCatalogs:
    """Seeded genres and MPA ratings."""

    def test_mpa_ratings(self, storage):
        names = [m.name for m in storage.mpa.list()]
        assert names == ["G", "PG", "PG-13", "R", "NC-17"]

    def test_genres(self, storage):
        genres = storage.genres.list()
        assert [g.id for g in genres] == [1, 2, 3, 4, 5, 6]
        assert genres[0].name == "Комедия"

    def test_get_by_id(self, storage):
        assert storage.mpa.get_by_id(1).name == "G"
        assert storage.genres.get_by_id(6).name == "Боевик"

    def test_get_missing_raises(self, storage):
        with pytest.raises(NotFoundError) as exc_info:
            storage.genres.get_by_id(100)
        assert exc_info.value.resource == "Genre"

    def test_as_map(self, storage):
        mpa = storage.mpa.as_map()
        assert set(mpa) == {1, 2, 3, 4, 5}
        assert mpa[5].name == "NC-17"


class TestBackendHooks:
    """Backends must supply their row and copy hooks."""

    def test_db_repository_requires_from_row(self, db):
        with pytest.raises(TypeError):
            DbEntityRepository(db)

    def test_memory_repository_requires_base(self):
        with pytest.raises(TypeError):
            InMemoryEntityRepository()
