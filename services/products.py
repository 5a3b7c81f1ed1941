from typing import List, Optional

from sqlalchemy.orm import Session

from core.config import settings
from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import RecordNotFound, ReferentialViolation, UniquenessViolation
from core.logging_config import get_logger
from models.brand import Brand
from models.category import Category
from models.product import Product
from services.slugs import resolve_product_slug

logger = get_logger(__name__)


def _check_references(db: Session, brand_id: Optional[int], category_id: Optional[int]) -> None:
    if brand_id is not None and db.get(Brand, brand_id) is None:
        raise ReferentialViolation(f"Brand {brand_id} does not exist")
    if category_id is not None and db.get(Category, category_id) is None:
        raise ReferentialViolation(f"Category {category_id} does not exist")


def list_products(
    db: Session,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    active_only: bool = False,
) -> List[Product]:
    query = db.query(Product)
    if brand_id is not None:
        query = query.filter(Product.brand_id == brand_id)
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)
    if active_only:
        query = query.filter(Product.is_active.is_(True))
    return query.order_by(Product.name).all()


def get_product(db: Session, product_id: int) -> Product:
    return get_or_raise(db, Product, product_id)


def get_product_by_slug(db: Session, slug: str) -> Product:
    product = db.query(Product).filter(Product.slug == slug).one_or_none()
    if product is None:
        raise RecordNotFound("Product", slug)
    return product


def create_product(
    db: Session,
    name: str,
    sku: str,
    brand_id: int,
    category_id: int,
    base_price,
    slug: Optional[str] = None,
    **fields,
) -> Product:
    _check_references(db, brand_id, category_id)
    if db.query(Product.id).filter(Product.sku == sku).first():
        raise UniquenessViolation(f"SKU {sku!r} already exists", field="sku")
    if slug and db.query(Product.id).filter(Product.slug == slug).first():
        raise UniquenessViolation(f"Product slug {slug!r} already exists", field="slug")
    slug = resolve_product_slug(db, name, sku, slug)

    fields.setdefault("currency", settings.DEFAULT_CURRENCY)
    with transaction(db):
        product = Product()
        apply_changes(
            product,
            {
                "name": name,
                "sku": sku,
                "slug": slug,
                "brand_id": brand_id,
                "category_id": category_id,
                "base_price": base_price,
                **fields,
            },
        )
        db.add(product)
    db.refresh(product)
    logger.info("Created product %s (%s, slug=%s)", product.id, product.sku, product.slug)
    return product


def update_product(db: Session, product_id: int, **changes) -> Product:
    product = get_product(db, product_id)
    _check_references(db, changes.get("brand_id"), changes.get("category_id"))
    sku = changes.get("sku")
    if sku and sku != product.sku and db.query(Product.id).filter(Product.sku == sku).first():
        raise UniquenessViolation(f"SKU {sku!r} already exists", field="sku")
    if not changes.get("slug", True):
        changes.pop("slug")
    with transaction(db):
        apply_changes(product, changes)
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Delete a product together with its images, variations and attribute values."""
    product = get_product(db, product_id)
    with transaction(db):
        db.delete(product)
    logger.info("Deleted product %s", product_id)
