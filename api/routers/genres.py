"""
Genre endpoints for the public API.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_reference_service
from api.schemas.genre import GenreResponse
from filmorate.service import ReferenceService

router = APIRouter()


@router.get("/genres", response_model=List[GenreResponse])
async def list_genres(service: ReferenceService = Depends(get_reference_service)):
    """
    Get all genres in id order.
    """
    return [GenreResponse.from_genre(g) for g in service.list_genres()]


@router.get("/genres/{genre_id}", response_model=GenreResponse)
async def get_genre(genre_id: int, service: ReferenceService = Depends(get_reference_service)):
    return GenreResponse.from_genre(service.get_genre(genre_id))
