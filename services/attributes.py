"""
Typed product attributes.

Attribute types declare a data kind (text, numeric, boolean, date, select,
multiselect) and optionally a regex and a list of allowed values. Writing a
product attribute validates the raw text against that declaration first;
the typed projection stored next to the text is computed at flush time by
``models.events`` and never rejects a write on its own.
"""
import re
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import ConstraintViolation, ReferentialViolation, UniquenessViolation, ValidationFailure
from core.logging_config import get_logger
from models.attribute import AttributeCategory, AttributeType, ProductAttribute
from models.product import Product
from models.values import BOOLEAN_TOKENS, cast_attribute_value, parse_date, parse_decimal

logger = get_logger(__name__)


def check_attribute_value(attribute_type: AttributeType, value: str) -> Optional[str]:
    """
    Run the validation chain for ``value``; return the reason it fails, or None when it passes.

    The data-kind rule is checked first, then the type's regex (for every kind).
    """
    kind = attribute_type.data_type
    allowed = attribute_type.allowed_values or None

    if kind == "numeric":
        if parse_decimal(value) is None:
            return "not a decimal number"
    elif kind == "date":
        if parse_date(value) is None:
            return "not a calendar date (YYYY-MM-DD)"
    elif kind == "boolean":
        if value.lower() not in BOOLEAN_TOKENS:
            return "not one of true/false/yes/no/1/0"
    elif kind == "select":
        if allowed is not None and value not in allowed:
            return f"not one of {allowed}"
    elif kind == "multiselect":
        if allowed is not None:
            for token in value.split(","):
                if token not in allowed:
                    return f"{token!r} is not one of {allowed}"

    if attribute_type.validation_regex:
        try:
            matched = re.search(attribute_type.validation_regex, value)
        except re.error as exc:
            raise ConstraintViolation(
                f"Attribute type {attribute_type.id} has an invalid validation regex: {exc}",
                field="validation_regex",
            ) from exc
        if matched is None:
            return f"does not match {attribute_type.validation_regex!r}"
    return None


def validate_attribute_value(db: Session, attribute_type_id: int, value: str) -> bool:
    attribute_type = get_or_raise(db, AttributeType, attribute_type_id)
    return check_attribute_value(attribute_type, value) is None


def set_product_attribute(
    db: Session,
    product_id: int,
    attribute_type_id: int,
    value: str,
    validate: bool = True,
    **fields,
) -> ProductAttribute:
    """
    Store the value of one attribute for one product, replacing any previous value.

    With ``validate`` the value must pass the attribute type's rules or
    ``ValidationFailure`` is raised and nothing is written.
    """
    if value is None:
        raise ConstraintViolation("Attribute value is required", field="value")
    if db.get(Product, product_id) is None:
        raise ReferentialViolation(f"Product {product_id} does not exist")
    attribute_type = db.get(AttributeType, attribute_type_id)
    if attribute_type is None:
        raise ReferentialViolation(f"Attribute type {attribute_type_id} does not exist")
    if validate:
        reason = check_attribute_value(attribute_type, value)
        if reason is not None:
            logger.info("Rejected %r for attribute type %s: %s", value, attribute_type_id, reason)
            raise ValidationFailure(attribute_type_id, value, reason)

    with transaction(db):
        attribute = (
            db.query(ProductAttribute)
            .filter(
                ProductAttribute.product_id == product_id,
                ProductAttribute.attribute_type_id == attribute_type_id,
            )
            .with_for_update()
            .one_or_none()
        )
        if attribute is None:
            attribute = ProductAttribute(product_id=product_id, attribute_type_id=attribute_type_id)
            db.add(attribute)
        apply_changes(attribute, {"value": value, **fields})
    db.refresh(attribute)
    return attribute


def list_product_attributes(db: Session, product_id: int) -> List[ProductAttribute]:
    return (
        db.query(ProductAttribute)
        .filter(ProductAttribute.product_id == product_id)
        .order_by(ProductAttribute.display_order, ProductAttribute.id)
        .all()
    )


def delete_product_attribute(db: Session, product_id: int, attribute_type_id: int) -> None:
    attribute = (
        db.query(ProductAttribute)
        .filter(
            ProductAttribute.product_id == product_id,
            ProductAttribute.attribute_type_id == attribute_type_id,
        )
        .one_or_none()
    )
    if attribute is None:
        raise ReferentialViolation(
            f"Product {product_id} has no value for attribute type {attribute_type_id}"
        )
    with transaction(db):
        db.delete(attribute)


def get_formatted_product_attributes(db: Session, product_id: int) -> List[dict]:
    """Visible attribute values of a product, grouped by attribute category for display."""
    rows = (
        db.query(
            AttributeCategory.name,
            AttributeType.name,
            ProductAttribute.value,
            AttributeType.unit_of_measure,
        )
        .join(AttributeType, ProductAttribute.attribute_type_id == AttributeType.id)
        .join(AttributeCategory, AttributeType.category_id == AttributeCategory.id)
        .filter(
            ProductAttribute.product_id == product_id,
            ProductAttribute.is_visible.is_(True),
            AttributeType.is_active.is_(True),
            AttributeCategory.is_active.is_(True),
        )
        .order_by(AttributeCategory.display_order, AttributeType.display_order, AttributeType.name)
        .all()
    )
    return [
        {
            "category_name": category_name,
            "attribute_name": attribute_name,
            "value": value,
            "unit_of_measure": unit,
        }
        for category_name, attribute_name, value, unit in rows
    ]


# Attribute schema

def list_attribute_categories(db: Session) -> List[AttributeCategory]:
    return db.query(AttributeCategory).order_by(AttributeCategory.display_order, AttributeCategory.name).all()


def create_attribute_category(db: Session, name: str, **fields) -> AttributeCategory:
    if db.query(AttributeCategory.id).filter(AttributeCategory.name == name).first():
        raise UniquenessViolation(f"Attribute category {name!r} already exists", field="name")
    with transaction(db):
        category = AttributeCategory()
        apply_changes(category, {"name": name, **fields})
        db.add(category)
    db.refresh(category)
    return category


def get_attribute_categories_with_count(db: Session) -> List[dict]:
    rows = (
        db.query(
            AttributeCategory.id,
            AttributeCategory.name,
            AttributeCategory.description,
            func.count(AttributeType.id),
        )
        .outerjoin(AttributeType, AttributeType.category_id == AttributeCategory.id)
        .filter(AttributeCategory.is_active.is_(True))
        .group_by(AttributeCategory.id, AttributeCategory.name, AttributeCategory.description)
        .order_by(AttributeCategory.display_order, AttributeCategory.name)
        .all()
    )
    return [
        {
            "category_id": category_id,
            "category_name": name,
            "category_description": description,
            "attributes_count": count,
        }
        for category_id, name, description, count in rows
    ]


def _check_regex(pattern: Optional[str]) -> None:
    if not pattern:
        return
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ConstraintViolation(f"Invalid validation regex {pattern!r}: {exc}", field="validation_regex") from exc


def create_attribute_type(db: Session, category_id: int, name: str, **fields) -> AttributeType:
    if db.get(AttributeCategory, category_id) is None:
        raise ReferentialViolation(f"Attribute category {category_id} does not exist")
    if db.query(AttributeType.id).filter(AttributeType.name == name).first():
        raise UniquenessViolation(f"Attribute type {name!r} already exists", field="name")
    _check_regex(fields.get("validation_regex"))
    with transaction(db):
        attribute_type = AttributeType()
        apply_changes(attribute_type, {"category_id": category_id, "name": name, **fields})
        db.add(attribute_type)
    db.refresh(attribute_type)
    return attribute_type


def _reproject_values(db: Session, attribute_type: AttributeType) -> int:
    """Recompute the typed projection of every stored value after the type changed its data kind."""
    attributes = (
        db.query(ProductAttribute)
        .filter(ProductAttribute.attribute_type_id == attribute_type.id)
        .with_for_update()
        .all()
    )
    for attribute in attributes:
        projection = cast_attribute_value(attribute_type.data_type, attribute.value)
        for column, value in projection.as_columns().items():
            setattr(attribute, column, value)
    logger.info(
        "Attribute type %s is now %s; re-projected %d values",
        attribute_type.id, attribute_type.data_type, len(attributes),
    )
    return len(attributes)


def update_attribute_type(db: Session, attribute_type_id: int, **changes) -> AttributeType:
    attribute_type = get_or_raise(db, AttributeType, attribute_type_id)
    category_id = changes.get("category_id")
    if category_id is not None and db.get(AttributeCategory, category_id) is None:
        raise ReferentialViolation(f"Attribute category {category_id} does not exist")
    name = changes.get("name")
    if name and db.query(AttributeType.id).filter(
        AttributeType.name == name, AttributeType.id != attribute_type_id
    ).first():
        raise UniquenessViolation(f"Attribute type {name!r} already exists", field="name")
    _check_regex(changes.get("validation_regex"))
    previous_kind = attribute_type.data_type
    with transaction(db):
        apply_changes(attribute_type, changes)
        if attribute_type.data_type != previous_kind:
            _reproject_values(db, attribute_type)
    db.refresh(attribute_type)
    return attribute_type


def get_attribute_types_by_category(db: Session, category_id: int) -> List[AttributeType]:
    return (
        db.query(AttributeType)
        .filter(AttributeType.category_id == category_id, AttributeType.is_active.is_(True))
        .order_by(AttributeType.display_order, AttributeType.name)
        .all()
    )
