"""
MPA rating endpoints for the public API.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_reference_service
from api.schemas.genre import MpaResponse
from filmorate.service import ReferenceService

router = APIRouter()


@router.get("/mpa", response_model=List[MpaResponse])
async def list_mpa(service: ReferenceService = Depends(get_reference_service)):
    """
    Get all MPA ratings in id order.
    """
    return [MpaResponse.from_mpa(m) for m in service.list_mpa()]


@router.get("/mpa/{mpa_id}", response_model=MpaResponse)
async def get_mpa(mpa_id: int, service: ReferenceService = Depends(get_reference_service)):
    return MpaResponse.from_mpa(service.get_mpa(mpa_id))
