"""
Product variations and their stock.

Every change to a variation's ``stock_quantity`` is written to the stock
ledger by the flush hook in ``models.events``; the functions here decide the
new quantity, lock the variation row while doing so, and say who changed it
and why.
"""
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import ConstraintViolation, ReferentialViolation, UniquenessViolation
from core.logging_config import get_logger
from models.product import Product
from models.size import SizeOption
from models.variation import ProductVariation, StockChange, StockLogEntry

logger = get_logger(__name__)


def _lock_variation(db: Session, variation_id: int) -> ProductVariation:
    variation = (
        db.query(ProductVariation)
        .filter(ProductVariation.id == variation_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if variation is None:
        raise ReferentialViolation(f"Variation {variation_id} does not exist")
    return variation


def list_variations(db: Session, product_id: int) -> List[ProductVariation]:
    return (
        db.query(ProductVariation)
        .filter(ProductVariation.product_id == product_id)
        .order_by(ProductVariation.id)
        .all()
    )


def get_variation(db: Session, variation_id: int) -> ProductVariation:
    return get_or_raise(db, ProductVariation, variation_id)


def create_variation(db: Session, product_id: int, sku: str, **fields) -> ProductVariation:
    """Add a variation; its opening stock is the baseline the ledger counts from."""
    if db.get(Product, product_id) is None:
        raise ReferentialViolation(f"Product {product_id} does not exist")
    size_option_id = fields.get("size_option_id")
    if size_option_id is not None and db.get(SizeOption, size_option_id) is None:
        raise ReferentialViolation(f"Size option {size_option_id} does not exist")
    if db.query(ProductVariation.id).filter(ProductVariation.sku == sku).first():
        raise UniquenessViolation(f"Variation SKU {sku!r} already exists", field="sku")

    with transaction(db):
        variation = ProductVariation()
        apply_changes(variation, {"product_id": product_id, "sku": sku, **fields})
        db.add(variation)
    db.refresh(variation)
    return variation


def update_variation(
    db: Session,
    variation_id: int,
    change: Optional[StockChange] = None,
    **changes,
) -> ProductVariation:
    """
    Update variation fields. A new ``stock_quantity`` among the changes is
    logged with ``change`` (an ``adjustment`` by the configured actor when
    omitted).
    """
    if "product_id" in changes:
        raise ConstraintViolation("Variations cannot be moved to another product", field="product_id")
    size_option_id = changes.get("size_option_id")
    if size_option_id is not None and db.get(SizeOption, size_option_id) is None:
        raise ReferentialViolation(f"Size option {size_option_id} does not exist")
    sku = changes.get("sku")
    if sku and db.query(ProductVariation.id).filter(
        ProductVariation.sku == sku, ProductVariation.id != variation_id
    ).first():
        raise UniquenessViolation(f"Variation SKU {sku!r} already exists", field="sku")

    with transaction(db):
        variation = _lock_variation(db, variation_id)
        quantity = changes.pop("stock_quantity", None)
        apply_changes(variation, changes)
        if quantity is not None:
            variation.set_stock(quantity, change)
    db.refresh(variation)
    return variation


def set_stock_quantity(
    db: Session,
    variation_id: int,
    quantity: int,
    change_type: str = "adjustment",
    changed_by: Optional[str] = None,
    reference_id: Optional[str] = None,
    notes: Optional[str] = None,
) -> ProductVariation:
    """Set an absolute quantity, e.g. after a stock count."""
    change = StockChange(change_type, changed_by, reference_id, notes)
    with transaction(db):
        variation = _lock_variation(db, variation_id)
        variation.set_stock(quantity, change)
    db.refresh(variation)
    return variation


def adjust_stock(
    db: Session,
    variation_id: int,
    delta: int,
    change_type: str = "adjustment",
    changed_by: Optional[str] = None,
    reference_id: Optional[str] = None,
    notes: Optional[str] = None,
) -> ProductVariation:
    """Move stock by ``delta`` relative to the locked current quantity (negative for sales, losses...)."""
    change = StockChange(change_type, changed_by, reference_id, notes)
    with transaction(db):
        variation = _lock_variation(db, variation_id)
        new_quantity = variation.stock_quantity + delta
        if new_quantity < 0:
            raise ConstraintViolation(
                f"Variation {variation_id} has {variation.stock_quantity} in stock; cannot apply {delta}",
                field="stock_quantity",
            )
        variation.set_stock(new_quantity, change)
    db.refresh(variation)
    return variation


def delete_variation(db: Session, variation_id: int) -> None:
    variation = get_variation(db, variation_id)
    with transaction(db):
        db.delete(variation)


def get_stock_history(db: Session, variation_id: int) -> List[StockLogEntry]:
    get_variation(db, variation_id)
    return (
        db.query(StockLogEntry)
        .filter(StockLogEntry.variation_id == variation_id)
        .order_by(StockLogEntry.id)
        .all()
    )


def get_low_stock_variations(db: Session) -> List[dict]:
    """Active variations at or below their low-stock threshold, emptiest first."""
    rows = (
        db.query(
            ProductVariation.id,
            Product.name,
            ProductVariation.sku,
            ProductVariation.stock_quantity,
            ProductVariation.low_stock_threshold,
        )
        .join(Product, ProductVariation.product_id == Product.id)
        .filter(
            ProductVariation.is_active.is_(True),
            ProductVariation.stock_quantity <= ProductVariation.low_stock_threshold,
        )
        .order_by(ProductVariation.stock_quantity.asc(), ProductVariation.id)
        .all()
    )
    return [
        {
            "variation_id": variation_id,
            "product_name": product_name,
            "sku": sku,
            "current_stock": stock,
            "threshold": threshold,
        }
        for variation_id, product_name, sku, stock, threshold in rows
    ]


def get_available_sizes(db: Session, product_id: int) -> List[dict]:
    """
    Every active size option with this product's stock in that size.

    Sizes the product has no variation for are listed with zero stock and
    ``is_available`` false.
    """
    get_or_raise(db, Product, product_id)
    rows = (
        db.query(SizeOption, ProductVariation)
        .outerjoin(
            ProductVariation,
            and_(
                ProductVariation.size_option_id == SizeOption.id,
                ProductVariation.product_id == product_id,
            ),
        )
        .filter(SizeOption.is_active.is_(True))
        .order_by(SizeOption.display_order, SizeOption.id)
        .all()
    )
    sizes = []
    for option, variation in rows:
        stock = variation.stock_quantity if variation is not None else 0
        sizes.append(
            {
                "size_option_id": option.id,
                "size_name": option.name,
                "size_code": option.code,
                "stock_quantity": stock,
                "is_available": bool(variation is not None and variation.is_active and stock > 0),
            }
        )
    return sizes
