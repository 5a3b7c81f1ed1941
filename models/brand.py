import re
from datetime import datetime
from sqlalchemy import String, DateTime, Boolean, SmallInteger, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.db import Base
from core.exceptions import ConstraintViolation

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class Brand(Base):
    __tablename__ = "brands"
    __table_args__ = (
        CheckConstraint("founded_year IS NULL OR founded_year >= 1000", name="ck_brand_founded_year"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    founded_year: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    country_of_origin: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    featured_priority: Mapped[int] = mapped_column(SmallInteger, default=0, index=True)
    brand_color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = relationship("Product", back_populates="brand", passive_deletes="all")

    @validates("brand_color")
    def validate_brand_color(self, key, value):
        if value is not None and not COLOR_PATTERN.match(value):
            raise ConstraintViolation(f"Brand color must look like #RRGGBB, got {value!r}", field=key)
        return value

    @validates("founded_year")
    def validate_founded_year(self, key, value):
        if value is not None and not 1000 <= value <= datetime.utcnow().year:
            raise ConstraintViolation(f"Founded year {value} is out of range", field=key)
        return value

    def __repr__(self):
        return f"<Brand {self.id} {self.slug}>"
