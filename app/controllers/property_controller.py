"""
Property Controller - public search/detail endpoints and authenticated submission
"""
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import Optional, List, Literal
from app.models.enums import PropertyPurpose, CategoryType, RentFrequency
from app.schemas.property import (
    PropertyResponse,
    PropertyCreateRequest,
    PaginatedPropertiesResponse,
    PropertiesMetadataResponse,
)
from app.services.property_service import (
    get_metadata,
    get_featured_properties,
    list_properties,
    get_property_by_id,
    get_similar_properties,
    create_property,
)
from app.utils.dependencies import get_current_user
from app.utils.errors import http_status_for

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("/metadata", response_model=PropertiesMetadataResponse)
async def get_properties_metadata():
    """Purposes, categories, amenities and location counts for building filters"""
    metadata = await get_metadata()
    return PropertiesMetadataResponse(**metadata)


@router.get("/featured", response_model=List[PropertyResponse])
async def get_featured(
    purpose: Optional[PropertyPurpose] = None,
    limit: int = Query(8, ge=1),
):
    props = await get_featured_properties(purpose=purpose, limit=limit)
    return [PropertyResponse(**prop) for prop in props]


@router.get("", response_model=PaginatedPropertiesResponse)
async def search_properties(
    q: Optional[str] = None,
    purpose: Optional[PropertyPurpose] = None,
    category_type: Optional[CategoryType] = Query(None, alias="categoryType"),
    sub_category_ids: Optional[str] = Query(None, alias="subCategoryIds"),
    city: Optional[str] = None,
    community: Optional[str] = None,
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0),
    exact_price: Optional[int] = Query(None, alias="exactPrice", ge=0),
    bedrooms: Optional[str] = None,
    bathrooms: Optional[str] = None,
    min_area_sqft: Optional[int] = Query(None, alias="minAreaSqft", ge=0),
    max_area_sqft: Optional[int] = Query(None, alias="maxAreaSqft", ge=0),
    rent_frequency: Optional[RentFrequency] = Query(None, alias="rentFrequency"),
    sort: Literal["newest", "oldest"] = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
):
    """
    Search listings.
    `bedrooms` / `bathrooms` are CSV thresholds matched as "at least any of",
    every word of `q` must appear in the title, description, city or community.
    """
    result = await list_properties(
        page=page,
        limit=limit,
        sort=sort,
        q=q,
        purpose=purpose,
        category_type=category_type,
        sub_category_ids=sub_category_ids,
        city=city,
        community=community,
        rent_frequency=rent_frequency,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_price=min_price,
        max_price=max_price,
        exact_price=exact_price,
        min_area_sqft=min_area_sqft,
        max_area_sqft=max_area_sqft,
    )
    return PaginatedPropertiesResponse(**result)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: str):
    """Get specific property by ID"""
    prop = await get_property_by_id(property_id)

    if not prop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    return PropertyResponse(**prop)


@router.get("/{property_id}/similar", response_model=List[PropertyResponse])
async def get_similar(property_id: str, limit: Optional[str] = None):
    try:
        parsed_limit = float(limit) if limit else None
    except ValueError:
        parsed_limit = None

    props = await get_similar_properties(property_id, parsed_limit)
    return [PropertyResponse(**prop) for prop in props]


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property_endpoint(
    request: PropertyCreateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Submit a new listing"""
    try:
        property_data = request.model_dump(mode="json")
        prop = await create_property(owner_id=current_user["user_id"], property_data=property_data)
        return PropertyResponse(**prop)
    except ValueError as e:
        raise HTTPException(
            status_code=http_status_for(e),
            detail=str(e)
        )
