from pydantic import AfterValidator, Field, HttpUrl, TypeAdapter, ValidationError
from typing import Annotated, Optional, List
from app.models.enums import (
    PropertyPurpose,
    CategoryType,
    RentFrequency,
    CompletionStatus,
    Urgency,
    OwnershipType,
)
from app.schemas.base import CamelModel

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    """Validate as an http(s) URL but keep the string exactly as sent"""
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid http(s) URL")
    return value


ImageUrl = Annotated[str, AfterValidator(_check_http_url)]


class AmenityResponse(CamelModel):
    id: str
    name: str


class CategoryRef(CamelModel):
    id: str
    name: str
    type: CategoryType


class SubCategoryRef(CamelModel):
    id: str
    name: str


class PropertyResponse(CamelModel):
    id: str
    owner_id: Optional[str] = None
    title: str
    description: str
    purpose: PropertyPurpose
    category: CategoryRef
    sub_category: Optional[SubCategoryRef] = None
    reference_no: Optional[str] = None
    completion: Optional[CompletionStatus] = None
    tru_check_on: Optional[str] = None
    handover_date: Optional[str] = None
    price: int
    bedrooms: int
    bathrooms: int
    area_sqft: int
    rent_frequency: Optional[RentFrequency] = None
    furnished: bool
    city: str
    community: str
    location: Optional[str] = None
    notes: Optional[str] = None
    urgency: Optional[Urgency] = None
    developer_name: Optional[str] = None
    ownership: Optional[OwnershipType] = None
    balcony_size_sqft: Optional[int] = None
    parking_available: Optional[bool] = None
    building_name: Optional[str] = None
    total_floors: Optional[int] = None
    swimming_pools: Optional[int] = None
    total_parking_spaces: Optional[int] = None
    total_building_area_sqft: Optional[int] = None
    elevators: Optional[int] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    cover_image_url: str
    image_urls: List[str] = []
    amenities: List[AmenityResponse] = []
    created_at: str
    updated_at: str


class PaginatedPropertiesResponse(CamelModel):
    items: List[PropertyResponse]
    page: int
    limit: int
    total: int
    has_more: bool


class PropertyCreateRequest(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    purpose: PropertyPurpose
    category_id: str
    sub_category_id: Optional[str] = None
    reference_no: Optional[str] = None
    completion: Optional[CompletionStatus] = None
    handover_date: Optional[str] = None
    price: int = Field(..., ge=0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    area_sqft: int = Field(..., ge=0)
    rent_frequency: Optional[RentFrequency] = None
    furnished: Optional[bool] = None
    city: str = Field(..., min_length=1)
    community: str = Field(..., min_length=1)
    location: Optional[str] = None
    notes: Optional[str] = None
    urgency: Optional[Urgency] = None
    developer_name: Optional[str] = None
    ownership: Optional[OwnershipType] = None
    balcony_size_sqft: Optional[int] = Field(None, ge=0)
    parking_available: Optional[bool] = None
    building_name: Optional[str] = None
    total_floors: Optional[int] = Field(None, ge=0)
    swimming_pools: Optional[int] = Field(None, ge=0)
    total_parking_spaces: Optional[int] = Field(None, ge=0)
    total_building_area_sqft: Optional[int] = Field(None, ge=0)
    elevators: Optional[int] = Field(None, ge=0)
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    cover_image_url: ImageUrl
    image_urls: List[ImageUrl]
    amenity_names: Optional[List[str]] = None


class SubCategoryResponse(CamelModel):
    id: str
    name: str


class CategoryResponse(CamelModel):
    id: str
    name: str
    type: CategoryType
    sub_categories: List[SubCategoryResponse] = []


class LocationCount(CamelModel):
    name: str
    count: int


class PropertiesMetadataResponse(CamelModel):
    purposes: List[PropertyPurpose]
    categories: List[CategoryResponse]
    amenities: List[AmenityResponse]
    cities: List[LocationCount]
    communities: List[LocationCount]
