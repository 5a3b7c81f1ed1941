import re
from typing import Optional

from sqlalchemy.orm import Session

from core.exceptions import ConstraintViolation
from core.logging_config import get_logger
from models.product import Product

logger = get_logger(__name__)

_DISALLOWED = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Lowercase, drop everything but letters, digits and whitespace, then hyphenate whitespace runs."""
    return _WHITESPACE.sub("-", _DISALLOWED.sub("", name.lower()))


def derive_slug(name: str) -> str:
    if not name:
        raise ConstraintViolation("A name is required to derive a slug", field="name")
    slug = slugify(name)
    if not slug:
        raise ConstraintViolation(f"Cannot derive a slug from {name!r}", field="slug")
    return slug


def resolve_slug(name: str, slug: Optional[str] = None) -> str:
    """Slug for a brand or category: the caller's slug when given, otherwise one derived from the name."""
    if slug:
        return slug
    derived = derive_slug(name)
    logger.debug("Derived slug %r from %r", derived, name)
    return derived


def resolve_product_slug(
    db: Session,
    name: str,
    sku: str,
    slug: Optional[str] = None,
    product_id: Optional[int] = None,
) -> str:
    """
    Slug for a product.

    A derived slug already used by another product gets ``-<sku>`` appended.
    SKUs are unique, so one suffix is enough; a collision that survives it is
    left for the unique index to report.
    """
    if slug:
        return slug
    derived = derive_slug(name)
    query = db.query(Product.id).filter(Product.slug == derived)
    if product_id is not None:
        query = query.filter(Product.id != product_id)
    if query.first() is not None:
        logger.info("Product slug %r is taken; disambiguating with SKU %s", derived, sku)
        derived = f"{derived}-{sku}"
    return derived
