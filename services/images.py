from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import ConstraintViolation, ReferentialViolation
from core.logging_config import get_logger
from models.image import ProductImage
from models.product import Product

logger = get_logger(__name__)


def _lock_product(db: Session, product_id: int) -> Product:
    """Row-lock the owning product so image writes for it run one at a time."""
    product = db.query(Product).filter(Product.id == product_id).with_for_update().one_or_none()
    if product is None:
        raise ReferentialViolation(f"Product {product_id} does not exist")
    return product


def _clear_primary(db: Session, product_id: int, keep_id: Optional[int] = None) -> int:
    stmt = update(ProductImage).where(
        ProductImage.product_id == product_id,
        ProductImage.is_primary.is_(True),
    )
    if keep_id is not None:
        stmt = stmt.where(ProductImage.id != keep_id)
    result = db.execute(
        stmt.values(is_primary=False),
        execution_options={"synchronize_session": "fetch"},
    )
    if result.rowcount:
        logger.info("Cleared primary flag on %s image(s) of product %s", result.rowcount, product_id)
    return result.rowcount


def list_images(db: Session, product_id: int) -> List[ProductImage]:
    return (
        db.query(ProductImage)
        .filter(ProductImage.product_id == product_id)
        .order_by(ProductImage.display_order, ProductImage.id)
        .all()
    )


def get_primary_image(db: Session, product_id: int) -> Optional[ProductImage]:
    return (
        db.query(ProductImage)
        .filter(ProductImage.product_id == product_id, ProductImage.is_primary.is_(True))
        .one_or_none()
    )


def add_image(db: Session, product_id: int, image_url: str, **fields) -> ProductImage:
    """Attach an image; a primary image takes the flag away from its siblings in the same commit."""
    with transaction(db), db.no_autoflush:
        _lock_product(db, product_id)
        if fields.get("is_primary"):
            _clear_primary(db, product_id)
        image = ProductImage()
        apply_changes(image, {"product_id": product_id, "image_url": image_url, **fields})
        db.add(image)
    db.refresh(image)
    return image


def update_image(db: Session, image_id: int, **changes) -> ProductImage:
    image = get_or_raise(db, ProductImage, image_id)
    if "product_id" in changes and changes["product_id"] != image.product_id:
        raise ConstraintViolation("Images cannot be moved to another product", field="product_id")
    with transaction(db), db.no_autoflush:
        _lock_product(db, image.product_id)
        if changes.get("is_primary"):
            _clear_primary(db, image.product_id, keep_id=image.id)
        apply_changes(image, changes)
    db.refresh(image)
    return image


def set_primary_image(db: Session, image_id: int) -> ProductImage:
    return update_image(db, image_id, is_primary=True)


def delete_image(db: Session, image_id: int) -> None:
    image = get_or_raise(db, ProductImage, image_id)
    with transaction(db):
        db.delete(image)
