from decimal import Decimal
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import ReferentialViolation, UniquenessViolation
from core.logging_config import get_logger
from models.brand import Brand
from models.product import Product
from services.slugs import resolve_slug

logger = get_logger(__name__)


def list_brands(db: Session, active_only: bool = False) -> List[Brand]:
    query = db.query(Brand)
    if active_only:
        query = query.filter(Brand.is_active.is_(True))
    return query.order_by(Brand.featured_priority.desc(), Brand.name).all()


def get_brand(db: Session, brand_id: int) -> Brand:
    return get_or_raise(db, Brand, brand_id)


def create_brand(db: Session, name: str, slug: Optional[str] = None, **fields) -> Brand:
    slug = resolve_slug(name, slug)
    if db.query(Brand.id).filter(Brand.name == name).first():
        raise UniquenessViolation(f"Brand name {name!r} already exists", field="name")
    if db.query(Brand.id).filter(Brand.slug == slug).first():
        raise UniquenessViolation(f"Brand slug {slug!r} already exists", field="slug")

    with transaction(db):
        brand = Brand()
        apply_changes(brand, {"name": name, "slug": slug, **fields})
        db.add(brand)
    db.refresh(brand)
    logger.info("Created brand %s (%s)", brand.id, brand.slug)
    return brand


def update_brand(db: Session, brand_id: int, **changes) -> Brand:
    brand = get_brand(db, brand_id)
    # A blank slug means "leave it"; slugs are only derived at creation
    if not changes.get("slug", True):
        changes.pop("slug")
    with transaction(db):
        apply_changes(brand, changes)
    db.refresh(brand)
    return brand


def delete_brand(db: Session, brand_id: int) -> None:
    brand = get_brand(db, brand_id)
    in_use = db.query(func.count(Product.id)).filter(Product.brand_id == brand_id).scalar()
    if in_use:
        raise ReferentialViolation(f"Brand {brand_id} is still referenced by {in_use} product(s)")
    with transaction(db):
        db.delete(brand)


def get_brand_statistics(db: Session, brand_id: int) -> dict:
    """Product rollups for one brand: totals, active count, distinct categories and average base price."""
    get_brand(db, brand_id)
    total, active, categories, avg_price = (
        db.query(
            func.count(func.distinct(Product.id)),
            func.count(func.distinct(case((Product.is_active.is_(True), Product.id)))),
            func.count(func.distinct(Product.category_id)),
            func.avg(Product.base_price),
        )
        .filter(Product.brand_id == brand_id)
        .one()
    )
    if avg_price is not None:
        avg_price = Decimal(str(avg_price)).quantize(Decimal("0.01"))
    return {
        "brand_id": brand_id,
        "total_products": total,
        "active_products": active,
        "product_categories": categories,
        "avg_price": avg_price,
    }
