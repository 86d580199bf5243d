from sqlalchemy import Column, String, Table, ForeignKey
from app.database.connection import Base


property_amenities = Table(
    "property_amenities",
    Base.metadata,
    Column("property_id", String, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    Column("amenity_id", String, ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True),
)


class Amenity(Base):
    __tablename__ = "amenities"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
