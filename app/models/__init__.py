# Database models
from app.models.user import User
from app.models.category import Category, SubCategory
from app.models.amenity import Amenity, property_amenities
from app.models.property import Property

__all__ = [
    "User",
    "Category",
    "SubCategory",
    "Amenity",
    "property_amenities",
    "Property",
]
