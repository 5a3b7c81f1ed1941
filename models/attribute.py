from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import (
    String, DateTime, Date, ForeignKey, Integer, SmallInteger, Numeric, Boolean, Text, JSON,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.db import Base
from core.exceptions import ConstraintViolation

DATA_KINDS = ("text", "numeric", "boolean", "date", "select", "multiselect")


class AttributeCategory(Base):
    __tablename__ = "attribute_categories"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    icon_class: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    attribute_types = relationship("AttributeType", back_populates="category", passive_deletes="all")


class AttributeType(Base):
    """Schema for one product attribute: its data kind plus optional regex and allowed values."""
    __tablename__ = "attribute_types"
    __table_args__ = (
        CheckConstraint(
            "data_type IN ('text', 'numeric', 'boolean', 'date', 'select', 'multiselect')",
            name="ck_attribute_type_data_type",
        ),
        CheckConstraint("search_weight >= 0 AND search_weight <= 10", name="ck_attribute_type_search_weight"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("attribute_categories.id", ondelete="RESTRICT"), index=True
    )
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    data_type: Mapped[str] = mapped_column(String(50), default="text")
    is_required: Mapped[bool] = mapped_column(Boolean, default=False)
    is_filterable: Mapped[bool] = mapped_column(Boolean, default=True)
    is_comparable: Mapped[bool] = mapped_column(Boolean, default=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    default_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    validation_regex: Mapped[str | None] = mapped_column(String(500), nullable=True)
    unit_of_measure: Mapped[str | None] = mapped_column(String(50), nullable=True)
    allowed_values: Mapped[list | None] = mapped_column(JSON, nullable=True)
    search_weight: Mapped[int] = mapped_column(SmallInteger, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("AttributeCategory", back_populates="attribute_types")

    @validates("data_type")
    def validate_data_type(self, key, value):
        if value not in DATA_KINDS:
            raise ConstraintViolation(f"Unknown attribute data type {value!r}", field=key)
        return value

    @validates("search_weight")
    def validate_search_weight(self, key, value):
        if value is not None and not 0 <= value <= 10:
            raise ConstraintViolation(f"Search weight must be between 0 and 10, got {value}", field=key)
        return value

    def __repr__(self):
        return f"<AttributeType {self.id} {self.name} ({self.data_type})>"


class ProductAttribute(Base):
    """Raw attribute text for a product plus the typed projection of that text."""
    __tablename__ = "product_attributes"
    __table_args__ = (
        UniqueConstraint("product_id", "attribute_type_id", name="uq_product_attribute"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    attribute_type_id: Mapped[int] = mapped_column(
        ForeignKey("attribute_types.id", ondelete="RESTRICT"), index=True
    )
    value: Mapped[str] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    is_filterable: Mapped[bool] = mapped_column(Boolean, default=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=True)
    value_numeric: Mapped[Decimal | None] = mapped_column(Numeric(15, 6), nullable=True)
    value_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    value_boolean: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = relationship("Product", back_populates="attributes")
    attribute_type = relationship("AttributeType")

    def __repr__(self):
        return f"<ProductAttribute product={self.product_id} type={self.attribute_type_id} {self.value!r}>"
