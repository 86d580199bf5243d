"""
scripts/seed.py

Seed reference data (categories, subcategories, amenities) and demo listings:

    python -m scripts.seed [--count 150]

Reference data is upserted by name; demo listings are only added until the
table holds `--count` rows.
"""

import argparse
import asyncio
import os
import random
import sys
import uuid

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select, func
from app.database.connection import AsyncSessionLocal, close_db
from app.models import Amenity, Category, SubCategory, Property
from app.models.enums import (
    CategoryType,
    CompletionStatus,
    OwnershipType,
    PropertyPurpose,
    RentFrequency,
    Urgency,
)

AMENITY_NAMES = [
    "Central A/C",
    "Balcony",
    "Covered Parking",
    "Built-in Wardrobes",
    "Security",
    "Shared Pool",
    "Shared Gym",
    "Pets Allowed",
    "Children Play Area",
    "Concierge",
]

CATEGORIES = [
    ("cat_residential", "Residential", CategoryType.RESIDENTIAL, [
        "Apartment", "Villa", "Townhouse", "Penthouse", "Villa Compound",
        "Hotel Apartment", "Land", "Building", "Other",
    ]),
    ("cat_commercial", "Commercial", CategoryType.COMMERCIAL, [
        "Office", "Shop", "Warehouse", "Labour Camp", "Bulk Unit",
        "Floor", "Factory", "Mixed Use Land", "Showroom", "Other",
    ]),
]

COMMUNITIES_BY_CITY = {
    "Dubai": ["Dubai Marina", "Downtown Dubai", "JVC", "Business Bay", "Palm Jumeirah"],
    "Abu Dhabi": ["Al Reem Island", "Khalifa City", "Saadiyat Island"],
    "Sharjah": ["Al Nahda", "Al Majaz", "Muwaileh"],
}

COVER_IMAGES = [
    "https://images.unsplash.com/photo-1560448204-e02f11c3d0e2?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1501183638710-841dd1904471?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1505691938895-1758d7feb511?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1484154218962-a197022b5858?auto=format&fit=crop&w=1200&q=80",
]

DEVELOPERS = ["Emaar Properties", "Damac Properties", "Nakheel", "Sobha Realty", "Meraas"]

RENT_DIVISORS = {
    RentFrequency.YEARLY: (1, 0),
    RentFrequency.MONTHLY: (12, 2500),
    RentFrequency.WEEKLY: (52, 600),
    RentFrequency.DAILY: (365, 120),
}


async def seed_reference_data(session):
    existing = {a.name for a in (await session.execute(select(Amenity))).scalars().all()}
    for name in AMENITY_NAMES:
        if name not in existing:
            session.add(Amenity(id=str(uuid.uuid4()), name=name))

    for sort_order, (category_id, name, category_type, sub_names) in enumerate(CATEGORIES, start=1):
        category = await session.get(Category, category_id)
        if category is None:
            category = Category(id=category_id)
            session.add(category)
        category.name = name
        category.type = category_type
        category.sort_order = sort_order

        existing_subs = {
            s.name for s in (
                await session.execute(select(SubCategory).where(SubCategory.category_id == category_id))
            ).scalars().all()
        }
        for idx, sub_name in enumerate(sub_names, start=1):
            if sub_name not in existing_subs:
                session.add(SubCategory(
                    id=str(uuid.uuid4()),
                    name=sub_name,
                    sort_order=idx,
                    category_id=category_id,
                ))

    await session.commit()


def _demo_price(purpose, is_commercial, bedrooms, area_sqft, rent_frequency):
    if purpose == PropertyPurpose.SALE:
        base = 950_000 if is_commercial else 650_000
        bedrooms_factor = 0 if is_commercial else bedrooms * 320_000
        area_factor = int(area_sqft * random.uniform(180, 260))
        return max(250_000, base + bedrooms_factor + area_factor + random.randint(0, 900_000))

    yearly = (120_000 if is_commercial else 55_000) + (0 if is_commercial else bedrooms * 40_000)
    yearly += random.randint(0, 140_000)
    divisor, floor = RENT_DIVISORS[rent_frequency]
    return max(floor, yearly // divisor)


def _demo_property(category, sub_category, amenities):
    is_commercial = category.type == CategoryType.COMMERCIAL
    city = random.choice(list(COMMUNITIES_BY_CITY))
    community = random.choice(COMMUNITIES_BY_CITY[city])
    purpose = random.choice(list(PropertyPurpose))

    bedrooms = 0 if is_commercial else (random.randint(1, 5) if random.random() > 0.18 else 0)
    bathrooms = 0 if is_commercial else random.randint(1, max(1, bedrooms))
    area_sqft = (
        800 + random.randint(0, 4200) if is_commercial
        else 420 + bedrooms * 360 + random.randint(0, 420)
    )
    rent_frequency = random.choice(list(RentFrequency)) if purpose == PropertyPurpose.RENT else None
    completion = CompletionStatus.READY if random.random() > 0.45 else CompletionStatus.OFF_PLAN

    beds_prefix = "" if is_commercial else f"{bedrooms} BR "
    verb = "Sale" if purpose == PropertyPurpose.SALE else "Rent"

    return Property(
        id=str(uuid.uuid4()),
        title=f"{beds_prefix}{sub_category.name} for {verb} in {community}",
        description="Modern layout, bright interiors, and excellent community amenities. "
                    "Close to transport, schools, and shopping.",
        purpose=purpose,
        category_id=category.id,
        sub_category_id=sub_category.id,
        reference_no=f"BAYUT-{uuid.uuid4().hex[:4].upper()}{random.randint(100000, 999999)}",
        completion=completion,
        handover_date=random.choice(["Q2 2027", "Q4 2027", "Q1 2028"]) if completion == CompletionStatus.OFF_PLAN else None,
        price=_demo_price(purpose, is_commercial, bedrooms, area_sqft, rent_frequency),
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        area_sqft=area_sqft,
        rent_frequency=rent_frequency,
        furnished=random.random() > 0.6,
        city=city,
        community=community,
        location=f"Near {random.choice(['metro station', 'mall', 'parks', 'schools', 'beach access'])}",
        urgency=random.choice(list(Urgency)),
        developer_name=random.choice(DEVELOPERS),
        ownership=OwnershipType.FREEHOLD if random.random() > 0.25 else OwnershipType.LEASEHOLD,
        parking_available=random.random() > 0.2,
        contact_name=random.choice(["Aman", "Sara", "Hassan", "Fatima"]),
        contact_email="agent@bayut-clone.dev",
        contact_phone="+971500000001",
        cover_image_url=random.choice(COVER_IMAGES),
        image_urls=random.sample(COVER_IMAGES, k=random.randint(2, 4)),
        amenities=random.sample(amenities, k=random.randint(3, 6)),
    )


async def seed_demo_properties(session, target_count: int) -> int:
    existing_count = (await session.execute(select(func.count()).select_from(Property))).scalar_one()
    missing = max(0, target_count - existing_count)
    if not missing:
        return 0

    amenities = (await session.execute(select(Amenity))).scalars().all()
    residential = await session.get(Category, "cat_residential")
    commercial = await session.get(Category, "cat_commercial")
    subs = {
        category.id: (
            await session.execute(select(SubCategory).where(SubCategory.category_id == category.id))
        ).scalars().all()
        for category in (residential, commercial)
    }

    for _ in range(missing):
        category = commercial if random.random() > 0.7 else residential
        session.add(_demo_property(category, random.choice(subs[category.id]), list(amenities)))

    await session.commit()
    return missing


async def main(target_count: int):
    try:
        async with AsyncSessionLocal() as session:
            await seed_reference_data(session)
            print("✅ Categories, subcategories and amenities seeded")
            created = await seed_demo_properties(session, target_count)
            print(f"✅ {created} demo properties created")
    finally:
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed reference data and demo listings")
    parser.add_argument("--count", type=int, default=150, help="target number of properties")
    args = parser.parse_args()
    asyncio.run(main(args.count))
