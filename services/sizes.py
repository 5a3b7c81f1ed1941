from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.db import apply_changes, get_or_raise, transaction
from core.exceptions import ReferentialViolation, UniquenessViolation
from models.size import SizeCategory, SizeOption
from models.variation import ProductVariation


def list_size_categories(db: Session) -> List[SizeCategory]:
    return db.query(SizeCategory).order_by(SizeCategory.display_order, SizeCategory.name).all()


def create_size_category(db: Session, name: str, **fields) -> SizeCategory:
    if db.query(SizeCategory.id).filter(SizeCategory.name == name).first():
        raise UniquenessViolation(f"Size category {name!r} already exists", field="name")
    with transaction(db):
        size_category = SizeCategory()
        apply_changes(size_category, {"name": name, **fields})
        db.add(size_category)
    db.refresh(size_category)
    return size_category


def list_size_options(db: Session, size_category_id: int, active_only: bool = False) -> List[SizeOption]:
    query = db.query(SizeOption).filter(SizeOption.size_category_id == size_category_id)
    if active_only:
        query = query.filter(SizeOption.is_active.is_(True))
    return query.order_by(SizeOption.display_order, SizeOption.id).all()


def _check_code(db: Session, size_category_id: int, code: str, exclude_id: int = None) -> None:
    query = db.query(SizeOption.id).filter(
        SizeOption.size_category_id == size_category_id,
        SizeOption.code == code,
    )
    if exclude_id is not None:
        query = query.filter(SizeOption.id != exclude_id)
    if query.first():
        raise UniquenessViolation(
            f"Size code {code!r} already exists in size category {size_category_id}", field="code"
        )


def create_size_option(db: Session, size_category_id: int, name: str, code: str, **fields) -> SizeOption:
    if db.get(SizeCategory, size_category_id) is None:
        raise ReferentialViolation(f"Size category {size_category_id} does not exist")
    _check_code(db, size_category_id, code)
    with transaction(db):
        option = SizeOption()
        apply_changes(option, {"size_category_id": size_category_id, "name": name, "code": code, **fields})
        db.add(option)
    db.refresh(option)
    return option


def update_size_option(db: Session, size_option_id: int, **changes) -> SizeOption:
    option = get_or_raise(db, SizeOption, size_option_id)
    size_category_id = changes.get("size_category_id", option.size_category_id)
    if db.get(SizeCategory, size_category_id) is None:
        raise ReferentialViolation(f"Size category {size_category_id} does not exist")
    _check_code(db, size_category_id, changes.get("code", option.code), exclude_id=option.id)
    with transaction(db):
        apply_changes(option, changes)
    db.refresh(option)
    return option


def delete_size_option(db: Session, size_option_id: int) -> None:
    option = get_or_raise(db, SizeOption, size_option_id)
    in_use = (
        db.query(func.count(ProductVariation.id))
        .filter(ProductVariation.size_option_id == size_option_id)
        .scalar()
    )
    if in_use:
        raise ReferentialViolation(f"Size option {size_option_id} is used by {in_use} variation(s)")
    with transaction(db):
        db.delete(option)
