from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Integer, Numeric, Boolean, Text, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.config import settings
from core.db import Base
from core.exceptions import ConstraintViolation
from models.brand import COLOR_PATTERN

STOCK_CHANGE_TYPES = ("purchase", "sale", "return", "adjustment", "inventory", "damaged", "lost")


@dataclass(frozen=True)
class StockChange:
    """Who changed stock and why; consumed by the ledger on the next flush."""
    change_type: str = "adjustment"
    changed_by: Optional[str] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None


class ProductVariation(Base):
    __tablename__ = "product_variations"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_variation_stock_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    size_option_id: Mapped[int | None] = mapped_column(
        ForeignKey("size_options.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    color_code: Mapped[str | None] = mapped_column(String(7), nullable=True)
    color_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sku: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    additional_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    # active_history keeps the previous value around for the stock ledger even if it was expired
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0, active_history=True)
    low_stock_threshold: Mapped[int] = mapped_column(
        Integer, default=lambda: settings.DEFAULT_LOW_STOCK_THRESHOLD
    )
    weight_diff_kg: Mapped[Decimal] = mapped_column(Numeric(10, 3), default=Decimal("0"))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    custom_attributes: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    barcode: Mapped[str | None] = mapped_column(String(50), nullable=True)
    location_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = relationship("Product", back_populates="variations")
    size_option = relationship("SizeOption")
    # The ledger is appended by models.events and removed only by the FK cascade
    stock_logs = relationship(
        "StockLogEntry",
        viewonly=True,
        order_by="StockLogEntry.id",
    )

    # Not mapped; see set_stock
    pending_stock_change = None

    def set_stock(self, quantity: int, change: Optional[StockChange] = None) -> None:
        if change is not None and change.change_type not in STOCK_CHANGE_TYPES:
            raise ConstraintViolation(f"Unknown stock change type {change.change_type!r}", field="change_type")
        # Only a quantity that passed validation may carry the change
        self.stock_quantity = quantity
        self.pending_stock_change = change

    @validates("color_code")
    def validate_color_code(self, key, value):
        if value is not None and not COLOR_PATTERN.match(value):
            raise ConstraintViolation(f"Color code must look like #RRGGBB, got {value!r}", field=key)
        return value

    @validates("stock_quantity")
    def validate_stock_quantity(self, key, value):
        if value is None or value < 0:
            raise ConstraintViolation(f"Stock quantity cannot be negative, got {value}", field=key)
        return value

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold

    def __repr__(self):
        return f"<ProductVariation {self.id} {self.sku} qty={self.stock_quantity}>"


class StockLogEntry(Base):
    """Append-only record of one stock_quantity change on a variation."""
    __tablename__ = "stock_log_entries"
    __table_args__ = (
        CheckConstraint(
            "change_type IN ('purchase', 'sale', 'return', 'adjustment', 'inventory', 'damaged', 'lost')",
            name="ck_stock_log_change_type",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    variation_id: Mapped[int] = mapped_column(
        ForeignKey("product_variations.id", ondelete="CASCADE"), index=True
    )
    previous_quantity: Mapped[int] = mapped_column(Integer)
    new_quantity: Mapped[int] = mapped_column(Integer)
    change_amount: Mapped[int] = mapped_column(Integer)
    change_type: Mapped[str] = mapped_column(String(20), default="adjustment")
    reference_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    changed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @validates("change_type")
    def validate_change_type(self, key, value):
        if value not in STOCK_CHANGE_TYPES:
            raise ConstraintViolation(f"Unknown stock change type {value!r}", field=key)
        return value

    def __repr__(self):
        return f"<StockLogEntry {self.id} variation={self.variation_id} {self.change_amount:+d}>"
