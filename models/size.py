from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey, Integer, Boolean, Text, JSON, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.db import Base
from core.exceptions import ConstraintViolation

MEASUREMENT_UNITS = ("cm", "inches", "mm", "feet", "meters", "us", "eu", "uk", "international")


class SizeCategory(Base):
    __tablename__ = "size_categories"
    __table_args__ = (
        CheckConstraint(
            "measurement_unit IN ('cm', 'inches', 'mm', 'feet', 'meters', 'us', 'eu', 'uk', 'international')",
            name="ck_size_category_unit",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50), unique=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    size_guide_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    measurement_unit: Mapped[str] = mapped_column(String(20), default="cm")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    options = relationship(
        "SizeOption",
        back_populates="size_category",
        order_by="SizeOption.display_order",
        passive_deletes="all",
    )

    @validates("measurement_unit")
    def validate_measurement_unit(self, key, value):
        if value not in MEASUREMENT_UNITS:
            raise ConstraintViolation(f"Unknown measurement unit {value!r}", field=key)
        return value


class SizeOption(Base):
    __tablename__ = "size_options"
    __table_args__ = (
        UniqueConstraint("size_category_id", "code", name="uq_size_category_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    size_category_id: Mapped[int] = mapped_column(
        ForeignKey("size_categories.id", ondelete="RESTRICT"), index=True
    )
    name: Mapped[str] = mapped_column(String(50))
    code: Mapped[str] = mapped_column(String(20))
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    dimensions: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    equivalent_sizes: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    size_category = relationship("SizeCategory", back_populates="options")

    def __repr__(self):
        return f"<SizeOption {self.id} {self.code}>"
