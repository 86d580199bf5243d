from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Boolean, Text, Enum, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.models.amenity import property_amenities
from app.models.enums import (
    PropertyPurpose,
    RentFrequency,
    CompletionStatus,
    Urgency,
    OwnershipType,
    enum_values,
)


def _utcnow():
    return datetime.now(timezone.utc)


class Property(Base):
    __tablename__ = "properties"

    id = Column(String, primary_key=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    purpose = Column(
        Enum(PropertyPurpose, name="property_purpose", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    category_id = Column(String, ForeignKey("categories.id"), nullable=False, index=True)
    sub_category_id = Column(String, ForeignKey("sub_categories.id"), nullable=True, index=True)

    reference_no = Column(String, nullable=True)
    completion = Column(Enum(CompletionStatus, name="completion_status", values_callable=enum_values), nullable=True)
    tru_check_on = Column(DateTime(timezone=True), nullable=True)
    handover_date = Column(String, nullable=True)

    price = Column(Integer, nullable=False, index=True)
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Integer, nullable=False, default=0)
    area_sqft = Column(Integer, nullable=False)
    rent_frequency = Column(Enum(RentFrequency, name="rent_frequency", values_callable=enum_values), nullable=True)
    furnished = Column(Boolean, nullable=False, default=False)

    city = Column(String, nullable=False, index=True)
    community = Column(String, nullable=False, index=True)
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    urgency = Column(Enum(Urgency, name="urgency", values_callable=enum_values), nullable=True)

    developer_name = Column(String, nullable=True)
    ownership = Column(Enum(OwnershipType, name="ownership_type", values_callable=enum_values), nullable=True)
    balcony_size_sqft = Column(Integer, nullable=True)
    parking_available = Column(Boolean, nullable=True)
    building_name = Column(String, nullable=True)
    total_floors = Column(Integer, nullable=True)
    swimming_pools = Column(Integer, nullable=True)
    total_parking_spaces = Column(Integer, nullable=True)
    total_building_area_sqft = Column(Integer, nullable=True)
    elevators = Column(Integer, nullable=True)

    contact_name = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)

    cover_image_url = Column(String, nullable=False)
    image_urls = Column(JSON, nullable=False, default=list)

    # set client-side so rows inserted in the same second still sort apart
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow)

    owner = relationship("User", backref="properties")
    category = relationship("Category")
    sub_category = relationship("SubCategory")
    amenities = relationship("Amenity", secondary=property_amenities, order_by="Amenity.name")

    __table_args__ = (
        Index('idx_property_purpose_city', 'purpose', 'city'),
        Index('idx_property_purpose_created', 'purpose', 'created_at'),
    )
