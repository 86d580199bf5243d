from sqlalchemy import Column, String, Integer, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.models.enums import CategoryType, enum_values


class Category(Base):
    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(
        Enum(CategoryType, name="category_type", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    sort_order = Column(Integer, default=0, nullable=False)

    sub_categories = relationship(
        "SubCategory",
        back_populates="category",
        order_by=lambda: [SubCategory.sort_order, SubCategory.name],
        cascade="all, delete-orphan",
    )


class SubCategory(Base):
    __tablename__ = "sub_categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    category_id = Column(String, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)

    category = relationship("Category", back_populates="sub_categories")

    __table_args__ = (
        UniqueConstraint('category_id', 'name', name='uq_sub_category_name'),
    )
