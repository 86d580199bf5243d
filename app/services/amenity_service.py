from typing import List, Dict
from sqlalchemy import select
from app.database.connection import AsyncSessionLocal
from app.models.amenity import Amenity


async def list_amenities() -> List[Dict]:
    """All amenities, alphabetical"""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Amenity).order_by(Amenity.name))
        return [{"id": a.id, "name": a.name} for a in result.scalars().all()]
