from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.config import settings
from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import CycleDetected, RecordNotFound, ReferentialViolation, UniquenessViolation
from core.logging_config import get_logger
from models.category import Category
from models.product import Product
from services.slugs import resolve_slug

logger = get_logger(__name__)


def list_categories(db: Session, parent_id: Optional[int] = None, roots_only: bool = False) -> List[Category]:
    query = db.query(Category)
    if roots_only:
        query = query.filter(Category.parent_id.is_(None))
    elif parent_id is not None:
        query = query.filter(Category.parent_id == parent_id)
    return query.order_by(Category.display_order, Category.name).all()


def get_category(db: Session, category_id: int) -> Category:
    return get_or_raise(db, Category, category_id)


def _ancestry(db: Session, category_id: int) -> List[Category]:
    """Categories from ``category_id`` up to its root, nearest first."""
    chain: List[Category] = []
    seen: List[int] = []
    current_id: Optional[int] = category_id
    while current_id is not None:
        if current_id in seen:
            logger.error("Cycle in category ancestry: %s", seen + [current_id])
            raise CycleDetected(seen + [current_id])
        category = db.get(Category, current_id)
        if category is None:
            raise RecordNotFound("Category", current_id)
        seen.append(current_id)
        chain.append(category)
        current_id = category.parent_id
    return chain


def get_category_path(db: Session, category_id: int, separator: Optional[str] = None) -> str:
    """Breadcrumb from the root down to ``category_id``, e.g. ``"A > B > C"``."""
    if separator is None:
        separator = settings.CATEGORY_PATH_SEPARATOR
    names = [category.name for category in reversed(_ancestry(db, category_id))]
    return separator.join(names)


def _check_parent(db: Session, category_id: Optional[int], parent_id: Optional[int]) -> None:
    if parent_id is None:
        return
    if db.get(Category, parent_id) is None:
        raise ReferentialViolation(f"Parent category {parent_id} does not exist")
    if category_id is None:
        return
    ancestors = [category.id for category in _ancestry(db, parent_id)]
    if category_id in ancestors:
        chain = [category_id] + ancestors[: ancestors.index(category_id) + 1]
        raise CycleDetected(chain)


def create_category(db: Session, name: str, slug: Optional[str] = None, **fields) -> Category:
    slug = resolve_slug(name, slug)
    _check_parent(db, None, fields.get("parent_id"))
    if db.query(Category.id).filter(Category.name == name).first():
        raise UniquenessViolation(f"Category name {name!r} already exists", field="name")
    if db.query(Category.id).filter(Category.slug == slug).first():
        raise UniquenessViolation(f"Category slug {slug!r} already exists", field="slug")

    with transaction(db):
        category = Category()
        apply_changes(category, {"name": name, "slug": slug, **fields})
        db.add(category)
    db.refresh(category)
    logger.info("Created category %s (%s)", category.id, category.slug)
    return category


def update_category(db: Session, category_id: int, **changes) -> Category:
    category = get_category(db, category_id)
    if "parent_id" in changes:
        _check_parent(db, category_id, changes["parent_id"])
    if not changes.get("slug", True):
        changes.pop("slug")
    with transaction(db):
        apply_changes(category, changes)
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)
    children = db.query(func.count(Category.id)).filter(Category.parent_id == category_id).scalar()
    if children:
        raise ReferentialViolation(f"Category {category_id} still has {children} subcategories")
    products = db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar()
    if products:
        raise ReferentialViolation(f"Category {category_id} is still referenced by {products} product(s)")
    with transaction(db):
        db.delete(category)
