"""
Film endpoints.

Handles film CRUD, likes and the popularity ranking.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_config, get_film_service
from api.schemas.common import ErrorResponse, SuccessResponse
from api.schemas.film import FilmCreate, FilmResponse, FilmUpdate
from filmorate.config import Config
from filmorate.service import FilmService

router = APIRouter()
logger = logging.getLogger("api.films")


@router.get("/films", response_model=List[FilmResponse])
async def list_films(service: FilmService = Depends(get_film_service)):
    """
    Get all films with their genres and likes.
    """
    return [FilmResponse.from_film(f) for f in service.list_films()]


@router.get("/films/popular", response_model=List[FilmResponse])
async def popular_films(
    count: Optional[int] = Query(None, ge=1, description="Number of films to return"),
    service: FilmService = Depends(get_film_service),
    config: Config = Depends(get_config),
):
    """
    Get the most liked films, most likes first.

    Defaults to POPULAR_DEFAULT_COUNT films.
    """
    films = service.most_popular(count or config.popular_default_count)
    return [FilmResponse.from_film(f) for f in films]


@router.get(
    "/films/{film_id}",
    response_model=FilmResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_film(film_id: int, service: FilmService = Depends(get_film_service)):
    return FilmResponse.from_film(service.get_film(film_id))


@router.post("/films", response_model=FilmResponse, status_code=status.HTTP_201_CREATED)
async def create_film(request: FilmCreate, service: FilmService = Depends(get_film_service)):
    """
    Create a film. The MPA rating and genres are referenced by id.
    """
    film = service.create_film(request.to_film())
    logger.info(f"Film created: film_id={film.id}")
    return FilmResponse.from_film(film)


@router.put("/films", response_model=FilmResponse)
async def update_film(request: FilmUpdate, service: FilmService = Depends(get_film_service)):
    """
    Replace a film, including its genre set. Likes are kept.
    """
    return FilmResponse.from_film(service.update_film(request.to_film()))


@router.delete("/films/{film_id}", response_model=SuccessResponse)
async def delete_film(film_id: int, service: FilmService = Depends(get_film_service)):
    service.delete_film(film_id)
    return SuccessResponse(message=f"Film {film_id} deleted")


@router.put("/films/{film_id}/like/{user_id}", response_model=SuccessResponse)
async def add_like(
    film_id: int,
    user_id: int,
    service: FilmService = Depends(get_film_service),
):
    """
    Like a film. Liking the same film twice is rejected.
    """
    service.add_like(film_id, user_id)
    return SuccessResponse()


@router.delete("/films/{film_id}/like/{user_id}", response_model=SuccessResponse)
async def remove_like(
    film_id: int,
    user_id: int,
    service: FilmService = Depends(get_film_service),
):
    """
    Remove a like. Removing a like that was never given succeeds.
    """
    service.remove_like(film_id, user_id)
    return SuccessResponse()
