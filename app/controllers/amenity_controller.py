from fastapi import APIRouter
from typing import List
from app.schemas.property import AmenityResponse
from app.services.amenity_service import list_amenities

router = APIRouter(prefix="/amenities", tags=["Amenities"])


@router.get("", response_model=List[AmenityResponse])
async def get_amenities():
    amenities = await list_amenities()
    return [AmenityResponse(**a) for a in amenities]
