from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey, Integer, SmallInteger, Boolean, Index, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.db import Base
from core.exceptions import ConstraintViolation

IMAGE_FILE_TYPES = ("jpg", "jpeg", "png", "webp", "gif", "svg")


class ProductImage(Base):
    __tablename__ = "product_images"
    __table_args__ = (
        # At most one primary image per product, whatever path the write took
        Index(
            "uq_product_primary_image",
            "product_id",
            unique=True,
            sqlite_where=text("is_primary = 1"),
            postgresql_where=text("is_primary = true"),
        ),
        CheckConstraint(
            "file_type IS NULL OR file_type IN ('jpg', 'jpeg', 'png', 'webp', 'gif', 'svg')",
            name="ck_product_image_file_type",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    image_url: Mapped[str] = mapped_column(String(500))
    alt_text: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_order: Mapped[int] = mapped_column(SmallInteger, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_size_kb: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(10), nullable=True)
    caption: Mapped[str | None] = mapped_column(String(255), nullable=True)
    copyright_info: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = relationship("Product", back_populates="images")

    @validates("file_type")
    def validate_file_type(self, key, value):
        if value is not None and value not in IMAGE_FILE_TYPES:
            raise ConstraintViolation(f"Unsupported image file type {value!r}", field=key)
        return value

    def __repr__(self):
        return f"<ProductImage {self.id} product={self.product_id} primary={self.is_primary}>"
