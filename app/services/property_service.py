"""
Property Service - public search, detail, similar listings and submission
All filtering, sorting and pagination is done in SQL.
"""
import logging
import math
import uuid
from typing import Optional, List, Dict, Iterable
from sqlalchemy import select, or_, and_, asc, desc, func
from sqlalchemy.orm import selectinload
from app.config import settings
from app.database.connection import AsyncSessionLocal
from app.models.amenity import Amenity
from app.models.category import Category, SubCategory
from app.models.enums import CategoryType, PropertyPurpose
from app.models.property import Property
from app.models.user import User
from app.services import mailer_service
from app.services.email_templates import property_submitted_email_html
from app.utils.errors import BadRequestError

logger = logging.getLogger(__name__)

MAX_SUB_CATEGORY_IDS = 25
MAX_ROOM_THRESHOLDS = 10
MAX_KEYWORDS = 8
DEFAULT_PAGE_SIZE = 20
DEFAULT_FEATURED_LIMIT = 8
DEFAULT_SIMILAR_LIMIT = 6
MAX_SIMILAR_LIMIT = 12
SIMILAR_PRICE_BAND = (0.75, 1.25)

_EAGER = (
    selectinload(Property.amenities),
    selectinload(Property.category),
    selectinload(Property.sub_category),
)


# ---------------------------------------------------------------------------
# Query-string parsing
# ---------------------------------------------------------------------------

def parse_csv_ids(raw: Optional[str], cap: int = MAX_SUB_CATEGORY_IDS) -> List[str]:
    """Split a comma-separated id list, dropping blanks; truncated to `cap`"""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()][:cap]


def parse_csv_thresholds(raw: Optional[str], cap: int = MAX_ROOM_THRESHOLDS) -> List[int]:
    """
    Parse "1,2,4" into [1, 2, 4].
    Malformed, negative or non-finite tokens are skipped, fractions are floored.
    """
    if not raw:
        return []
    values = []
    for part in raw.split(","):
        token = part.strip()
        if not token:
            continue
        try:
            number = float(token)
        except ValueError:
            continue
        if not math.isfinite(number) or number < 0:
            continue
        values.append(math.floor(number))
    return values[:cap]


def parse_keywords(q: Optional[str], cap: int = MAX_KEYWORDS) -> List[str]:
    if not q:
        return []
    return q.split()[:cap]


def normalize_price_range(min_price: Optional[int], max_price: Optional[int]):
    """Swap an inverted range so min <= max"""
    if min_price is not None and max_price is not None and min_price > max_price:
        return max_price, min_price
    return min_price, max_price


def compute_has_more(page: int, limit: int, count: int, total: int) -> bool:
    return (page - 1) * limit + count < total


def resolve_similar_limit(limit: Optional[float]) -> int:
    """Missing, zero or non-numeric limits fall back to the default; others clamp to 1..12"""
    if not limit or not math.isfinite(limit):
        return DEFAULT_SIMILAR_LIMIT
    return max(1, min(MAX_SIMILAR_LIMIT, int(limit)))


def similar_price_band(price: int):
    low, high = SIMILAR_PRICE_BAND
    return max(0, math.floor(price * low)), math.ceil(price * high)


def _at_least_any(column, thresholds: Iterable[int]):
    return or_(*[column >= value for value in thresholds])


def build_property_filters(
    q: Optional[str] = None,
    purpose: Optional[PropertyPurpose] = None,
    category_type: Optional[CategoryType] = None,
    sub_category_ids: Optional[str] = None,
    city: Optional[str] = None,
    community: Optional[str] = None,
    rent_frequency=None,
    bedrooms: Optional[str] = None,
    bathrooms: Optional[str] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    exact_price: Optional[int] = None,
    min_area_sqft: Optional[int] = None,
    max_area_sqft: Optional[int] = None,
) -> list:
    """
    Translate the flat search parameters into SQLAlchemy conditions (ANDed by the caller).
    Absent or empty parameters add no condition.
    """
    conditions = []

    if purpose:
        conditions.append(Property.purpose == purpose)
    if city:
        conditions.append(Property.city == city)
    if community:
        conditions.append(Property.community == community)
    if rent_frequency:
        conditions.append(Property.rent_frequency == rent_frequency)
    if category_type:
        conditions.append(Property.category.has(Category.type == category_type))

    sub_category_id_list = parse_csv_ids(sub_category_ids)
    if sub_category_id_list:
        conditions.append(Property.sub_category_id.in_(sub_category_id_list))

    # exact price wins over the range
    if exact_price is not None:
        conditions.append(Property.price == exact_price)
    else:
        min_price, max_price = normalize_price_range(min_price, max_price)
        if min_price is not None:
            conditions.append(Property.price >= min_price)
        if max_price is not None:
            conditions.append(Property.price <= max_price)

    if min_area_sqft is not None:
        conditions.append(Property.area_sqft >= min_area_sqft)
    if max_area_sqft is not None:
        conditions.append(Property.area_sqft <= max_area_sqft)

    bedroom_list = parse_csv_thresholds(bedrooms)
    if bedroom_list:
        conditions.append(_at_least_any(Property.bedrooms, bedroom_list))

    bathroom_list = parse_csv_thresholds(bathrooms)
    if bathroom_list:
        conditions.append(_at_least_any(Property.bathrooms, bathroom_list))

    # every keyword must hit at least one of the text columns
    for token in parse_keywords(q):
        conditions.append(
            or_(
                Property.title.icontains(token, autoescape=True),
                Property.description.icontains(token, autoescape=True),
                Property.city.icontains(token, autoescape=True),
                Property.community.icontains(token, autoescape=True),
            )
        )

    return conditions


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def property_to_dict(prop: Property) -> Dict:
    return {
        "id": prop.id,
        "owner_id": prop.owner_id,
        "title": prop.title,
        "description": prop.description,
        "purpose": _enum_value(prop.purpose),
        "category": {
            "id": prop.category.id,
            "name": prop.category.name,
            "type": _enum_value(prop.category.type),
        },
        "sub_category": (
            {"id": prop.sub_category.id, "name": prop.sub_category.name}
            if prop.sub_category else None
        ),
        "reference_no": prop.reference_no,
        "completion": _enum_value(prop.completion),
        "tru_check_on": prop.tru_check_on.isoformat() if prop.tru_check_on else None,
        "handover_date": prop.handover_date,
        "price": prop.price,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "area_sqft": prop.area_sqft,
        "rent_frequency": _enum_value(prop.rent_frequency),
        "furnished": bool(prop.furnished),
        "city": prop.city,
        "community": prop.community,
        "location": prop.location,
        "notes": prop.notes,
        "urgency": _enum_value(prop.urgency),
        "developer_name": prop.developer_name,
        "ownership": _enum_value(prop.ownership),
        "balcony_size_sqft": prop.balcony_size_sqft,
        "parking_available": prop.parking_available,
        "building_name": prop.building_name,
        "total_floors": prop.total_floors,
        "swimming_pools": prop.swimming_pools,
        "total_parking_spaces": prop.total_parking_spaces,
        "total_building_area_sqft": prop.total_building_area_sqft,
        "elevators": prop.elevators,
        "contact_name": prop.contact_name,
        "contact_email": prop.contact_email,
        "contact_phone": prop.contact_phone,
        "cover_image_url": prop.cover_image_url,
        "image_urls": list(prop.image_urls or []),
        "amenities": [{"id": a.id, "name": a.name} for a in prop.amenities],
        "created_at": prop.created_at.isoformat() if prop.created_at else "",
        "updated_at": prop.updated_at.isoformat() if prop.updated_at else "",
    }


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def list_properties(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    sort: str = "newest",
    **filters,
) -> Dict:
    """
    Search listings. `filters` are the keyword arguments of build_property_filters.
    Returns {items, page, limit, total, has_more}.
    """
    conditions = build_property_filters(**filters)
    where_clause = and_(*conditions) if conditions else None

    order = asc(Property.created_at) if sort == "oldest" else desc(Property.created_at)

    async with AsyncSessionLocal() as session:
        count_stmt = select(func.count()).select_from(Property)
        stmt = select(Property).options(*_EAGER)
        if where_clause is not None:
            count_stmt = count_stmt.where(where_clause)
            stmt = stmt.where(where_clause)

        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one() or 0

        stmt = stmt.order_by(order, Property.id).offset((page - 1) * limit).limit(limit)
        result = await session.execute(stmt)
        items = [property_to_dict(prop) for prop in result.scalars().all()]

    return {
        "items": items,
        "page": page,
        "limit": limit,
        "total": total,
        "has_more": compute_has_more(page, limit, len(items), total),
    }


async def get_featured_properties(
    purpose: Optional[PropertyPurpose] = None,
    limit: int = DEFAULT_FEATURED_LIMIT,
) -> List[Dict]:
    """Latest listings, optionally for one purpose"""
    async with AsyncSessionLocal() as session:
        stmt = select(Property).options(*_EAGER)
        if purpose:
            stmt = stmt.where(Property.purpose == purpose)
        stmt = stmt.order_by(desc(Property.created_at)).limit(limit)

        result = await session.execute(stmt)
        return [property_to_dict(prop) for prop in result.scalars().all()]


async def get_property_by_id(property_id: str) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = select(Property).options(*_EAGER).where(Property.id == property_id)
        result = await session.execute(stmt)
        prop = result.scalar_one_or_none()

        if not prop:
            return None

        return property_to_dict(prop)


async def get_similar_properties(property_id: str, limit: Optional[float] = None) -> List[Dict]:
    """
    Listings like `property_id`: same purpose and category (and subcategory when set),
    same community or city, price within 75%..125% of the base price. Newest first.
    """
    take = resolve_similar_limit(limit)

    async with AsyncSessionLocal() as session:
        base_result = await session.execute(select(Property).where(Property.id == property_id))
        base = base_result.scalar_one_or_none()

        if not base:
            return []

        low, high = similar_price_band(base.price)
        conditions = [
            Property.id != base.id,
            Property.purpose == base.purpose,
            Property.category_id == base.category_id,
            or_(Property.community == base.community, Property.city == base.city),
            Property.price >= low,
            Property.price <= high,
        ]
        if base.sub_category_id:
            conditions.append(Property.sub_category_id == base.sub_category_id)

        stmt = (
            select(Property)
            .options(*_EAGER)
            .where(and_(*conditions))
            .order_by(desc(Property.created_at))
            .limit(take)
        )
        result = await session.execute(stmt)
        return [property_to_dict(prop) for prop in result.scalars().all()]


async def get_metadata() -> Dict:
    """Reference data for the search UI: purposes, categories, amenities, cities, communities"""
    async with AsyncSessionLocal() as session:
        amenities_result = await session.execute(select(Amenity).order_by(Amenity.name))
        amenities = amenities_result.scalars().all()

        categories_result = await session.execute(
            select(Category)
            .options(selectinload(Category.sub_categories))
            .order_by(Category.sort_order, Category.name)
        )
        categories = categories_result.scalars().all()

        city_count = func.count(Property.id)
        cities_result = await session.execute(
            select(Property.city, city_count)
            .group_by(Property.city)
            .order_by(city_count.desc(), Property.city)
        )

        community_count = func.count(Property.id)
        communities_result = await session.execute(
            select(Property.community, community_count)
            .group_by(Property.community)
            .order_by(community_count.desc(), Property.community)
        )

        return {
            "purposes": [p.value for p in PropertyPurpose],
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "type": _enum_value(c.type),
                    "sub_categories": [{"id": s.id, "name": s.name} for s in c.sub_categories],
                }
                for c in categories
            ],
            "amenities": [{"id": a.id, "name": a.name} for a in amenities],
            "cities": [{"name": name, "count": count} for name, count in cities_result.all()],
            "communities": [{"name": name, "count": count} for name, count in communities_result.all()],
        }


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def _validate_listing_rules(data: Dict, category: Category) -> None:
    purpose = data.get("purpose")
    rent_frequency = data.get("rent_frequency")

    if purpose == PropertyPurpose.SALE and rent_frequency:
        raise BadRequestError("Rent frequency is only allowed for rent")
    if purpose == PropertyPurpose.RENT and not rent_frequency:
        raise BadRequestError("Rent frequency is required for rent")

    bedrooms = data.get("bedrooms", 0)
    bathrooms = data.get("bathrooms", 0)
    if category.type == CategoryType.COMMERCIAL:
        if bedrooms != 0 or bathrooms != 0:
            raise BadRequestError("Commercial properties must have bedrooms and bathrooms set to 0")
    elif bedrooms < 0 or bathrooms < 0:
        raise BadRequestError("Invalid bedrooms/bathrooms")

    if data.get("area_sqft", 0) <= 0:
        raise BadRequestError("Area must be greater than 0")
    if data.get("price", 0) <= 0:
        raise BadRequestError("Expected price/rent must be greater than 0")


async def _connect_or_create_amenities(session, names: Iterable[str]) -> List[Amenity]:
    wanted = []
    for name in names or []:
        name = name.strip()
        if name and name not in wanted:
            wanted.append(name)
    if not wanted:
        return []

    result = await session.execute(select(Amenity).where(Amenity.name.in_(wanted)))
    existing = {a.name: a for a in result.scalars().all()}

    amenities = []
    for name in wanted:
        amenity = existing.get(name)
        if amenity is None:
            amenity = Amenity(id=str(uuid.uuid4()), name=name)
            session.add(amenity)
        amenities.append(amenity)
    return amenities


async def _notify_owner(owner_email: str, prop: Dict) -> None:
    """Submission receipt; failures are logged and never bubble up"""
    purpose_label = "For rent" if prop["purpose"] == PropertyPurpose.RENT.value else "For sale"
    price_label = f"AED {prop['price']:,}"
    if prop["purpose"] == PropertyPurpose.RENT.value and prop["rent_frequency"]:
        price_label = f"{price_label} / {prop['rent_frequency']}"
    type_label = prop["sub_category"]["name"] if prop["sub_category"] else prop["category"]["name"]

    html = property_submitted_email_html(
        title=prop["title"],
        type_label=type_label,
        purpose_label=purpose_label,
        price_label=price_label,
        location_line=f"{prop['community']}, {prop['city']}",
        beds=prop["bedrooms"],
        baths=prop["bathrooms"],
        area_sqft=prop["area_sqft"],
        property_url=f"{settings.frontend_base_url}/properties/{prop['id']}",
        reference_no=prop["reference_no"],
    )

    try:
        await mailer_service.send_html(owner_email, "Your property has been submitted", html)
    except Exception as e:
        logger.error(f"Property submission email failed: {e}")


async def create_property(owner_id: str, property_data: Dict) -> Dict:
    """Validate and store a new listing for `owner_id`, then email the owner a receipt"""
    data = dict(property_data)
    amenity_names = data.pop("amenity_names", None) or []

    async with AsyncSessionLocal() as session:
        owner = (await session.execute(select(User).where(User.id == owner_id))).scalar_one_or_none()
        if not owner:
            raise BadRequestError("Invalid user")

        category = (
            await session.execute(select(Category).where(Category.id == data.get("category_id")))
        ).scalar_one_or_none()
        if not category:
            raise BadRequestError("Invalid category")

        sub_category_id = (data.get("sub_category_id") or "").strip()
        if not sub_category_id:
            raise BadRequestError("Subcategory is required")

        sub_category = (
            await session.execute(select(SubCategory).where(SubCategory.id == sub_category_id))
        ).scalar_one_or_none()
        if not sub_category or sub_category.category_id != category.id:
            raise BadRequestError("Invalid subcategory for selected category")

        _validate_listing_rules(data, category)

        amenities = await _connect_or_create_amenities(session, amenity_names)

        new_property = Property(
            id=str(uuid.uuid4()),
            owner_id=owner.id,
            title=data["title"],
            description=data["description"],
            purpose=data["purpose"],
            category=category,
            sub_category=sub_category,
            reference_no=data.get("reference_no"),
            completion=data.get("completion"),
            handover_date=data.get("handover_date"),
            price=data["price"],
            bedrooms=data["bedrooms"],
            bathrooms=data["bathrooms"],
            area_sqft=data["area_sqft"],
            rent_frequency=data.get("rent_frequency") if data["purpose"] == PropertyPurpose.RENT else None,
            furnished=data.get("furnished") or False,
            city=data["city"],
            community=data["community"],
            location=data.get("location"),
            notes=data.get("notes"),
            urgency=data.get("urgency"),
            developer_name=data.get("developer_name"),
            ownership=data.get("ownership"),
            balcony_size_sqft=data.get("balcony_size_sqft"),
            parking_available=data.get("parking_available"),
            building_name=data.get("building_name"),
            total_floors=data.get("total_floors"),
            swimming_pools=data.get("swimming_pools"),
            total_parking_spaces=data.get("total_parking_spaces"),
            total_building_area_sqft=data.get("total_building_area_sqft"),
            elevators=data.get("elevators"),
            # the owner's profile wins over whatever the form sent
            contact_name=owner.name or data.get("contact_name"),
            contact_email=owner.email,
            contact_phone=owner.phone or data.get("contact_phone"),
            cover_image_url=data["cover_image_url"],
            image_urls=list(data.get("image_urls") or []),
            amenities=amenities,
        )

        session.add(new_property)
        await session.commit()

        created = property_to_dict(new_property)
        owner_email = owner.email

    logger.info(f"🏠 Property {created['id']} submitted by user {owner_id}")
    await _notify_owner(owner_email, created)
    return created
