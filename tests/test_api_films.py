"""
Film API endpoint tests.

Run through the FastAPI app against a fresh in-memory SQLite store.
"""

import pytest

from conftest import film_payload, user_payload


@pytest.fixture
def user_ids(api_client):
    """Create three users through the API."""
    ids = []
    for login in ("neo", "trinity", "morpheus"):
        response = api_client.post("/api/v1/users", json=user_payload(login))
        ids.append(response.json()["id"])
    return ids


def create_film(client, **overrides) -> dict:
    response = client.post("/api/v1/films", json=film_payload(**overrides))
    assert response.status_code == 201
    return response.json()


class TestFilmCrud:
    """Create, read, update and delete films."""

    def test_create_film(self, api_client):
        response = api_client.post(
            "/api/v1/films",
            json=film_payload(genres=[{"id": 6}, {"id": 4}])
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["name"] == "Matrix"
        assert data["release_date"] == "1999-03-31"
        assert data["mpa"] == {"id": 4, "name": "R"}
        assert data["genres"] == [{"id": 4, "name": "Триллер"}, {"id": 6, "name": "Боевик"}]
        assert data["likes"] == []

    def test_get_film(self, api_client):
        created = create_film(api_client)

        response = api_client.get(f"/api/v1/films/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_film_not_found(self, api_client):
        response = api_client.get("/api/v1/films/999")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "not_found"
        assert data["details"] == {"resource": "Film", "id": 999}

    def test_list_films(self, api_client):
        create_film(api_client, name="First")
        create_film(api_client, name="Second")

        response = api_client.get("/api/v1/films")

        assert response.status_code == 200
        assert [f["name"] for f in response.json()] == ["First", "Second"]

    def test_update_film(self, api_client):
        created = create_film(api_client, genres=[{"id": 1}])

        response = api_client.put(
            "/api/v1/films",
            json=film_payload(id=created["id"], name="Matrix Reloaded", genres=[{"id": 2}])
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Matrix Reloaded"
        assert [g["id"] for g in data["genres"]] == [2]

    def test_update_film_not_found(self, api_client):
        response = api_client.put("/api/v1/films", json=film_payload(id=999))
        assert response.status_code == 404

    def test_delete_film(self, api_client):
        created = create_film(api_client)

        response = api_client.delete(f"/api/v1/films/{created['id']}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert api_client.get(f"/api/v1/films/{created['id']}").status_code == 404


class TestFilmValidation:
    """Request validation for films."""

    def test_release_date_before_floor(self, api_client):
        response = api_client.post("/api/v1/films", json=film_payload(release_date="1895-12-27"))

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_release_date_on_floor(self, api_client):
        response = api_client.post("/api/v1/films", json=film_payload(release_date="1895-12-28"))
        assert response.status_code == 201

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"name": "   "},
        {"description": "x" * 201},
        {"duration": 0},
        {"duration": -10},
        {"mpa": None},
    ])
    def test_invalid_fields(self, api_client, overrides):
        response = api_client.post("/api/v1/films", json=film_payload(**overrides))
        assert response.status_code == 422

    def test_description_at_limit(self, api_client):
        response = api_client.post("/api/v1/films", json=film_payload(description="x" * 200))
        assert response.status_code == 201

    def test_unknown_mpa(self, api_client):
        response = api_client.post("/api/v1/films", json=film_payload(mpa={"id": 99}))

        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "Mpa"

    def test_unknown_genre(self, api_client):
        response = api_client.post("/api/v1/films", json=film_payload(genres=[{"id": 42}]))
        assert response.status_code == 404


class TestLikes:
    """Like endpoints."""

    def test_add_and_remove_like(self, api_client, user_ids):
        film = create_film(api_client)

        response = api_client.put(f"/api/v1/films/{film['id']}/like/{user_ids[0]}")
        assert response.status_code == 200
        assert api_client.get(f"/api/v1/films/{film['id']}").json()["likes"] == [user_ids[0]]

        response = api_client.delete(f"/api/v1/films/{film['id']}/like/{user_ids[0]}")
        assert response.status_code == 200
        assert api_client.get(f"/api/v1/films/{film['id']}").json()["likes"] == []

    def test_duplicate_like(self, api_client, user_ids):
        film = create_film(api_client)
        api_client.put(f"/api/v1/films/{film['id']}/like/{user_ids[0]}")

        response = api_client.put(f"/api/v1/films/{film['id']}/like/{user_ids[0]}")

        assert response.status_code == 422

    def test_like_unknown_user(self, api_client):
        film = create_film(api_client)

        response = api_client.put(f"/api/v1/films/{film['id']}/like/999")

        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "User"


class TestPopular:
    """Most popular films."""

    def test_popular(self, api_client, user_ids):
        films = [create_film(api_client, name=f"Film {i}") for i in range(3)]
        for user_id in user_ids:
            api_client.put(f"/api/v1/films/{films[1]['id']}/like/{user_id}")
        api_client.put(f"/api/v1/films/{films[2]['id']}/like/{user_ids[0]}")

        response = api_client.get("/api/v1/films/popular", params={"count": 2})

        assert response.status_code == 200
        assert [f["id"] for f in response.json()] == [films[1]["id"], films[2]["id"]]

    def test_popular_default_count(self, api_client):
        for i in range(12):
            create_film(api_client, name=f"Film {i}")

        response = api_client.get("/api/v1/films/popular")

        assert response.status_code == 200
        assert len(response.json()) == 10

    def test_popular_invalid_count(self, api_client):
        response = api_client.get("/api/v1/films/popular", params={"count": 0})
        assert response.status_code == 422
