"""
Domain errors raised by the catalog services.

Every write that breaks a catalog rule is rejected with one of these before
(or instead of) committing, so the caller never sees partial state.
"""
from typing import Any, Optional, Sequence

from sqlalchemy.exc import IntegrityError


class CatalogError(Exception):
    """Base class for every rule violation the engine reports."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UniquenessViolation(CatalogError):
    """Duplicate SKU, slug, name or (size category, code) pair."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ReferentialViolation(CatalogError):
    """Missing related entity, or a delete blocked by a restrict rule."""


class RecordNotFound(CatalogError):
    def __init__(self, entity: str, record_id: Any):
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class ValidationFailure(CatalogError):
    """An attribute value was rejected by its attribute type's rules."""

    def __init__(self, attribute_type_id: int, value: str, reason: str):
        super().__init__(f"Invalid value {value!r} for attribute type {attribute_type_id}: {reason}")
        self.attribute_type_id = attribute_type_id
        self.value = value
        self.reason = reason


class CycleDetected(CatalogError):
    def __init__(self, chain: Sequence[int]):
        joined = " -> ".join(str(node) for node in chain)
        super().__init__(f"Category ancestry contains a cycle: {joined}")
        self.chain = list(chain)


class ConstraintViolation(CatalogError):
    """Range, format or enum check failed at write time."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def translate_integrity_error(exc: IntegrityError) -> CatalogError:
    """Map a store-level IntegrityError onto the matching domain error."""
    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "unique" in text or "duplicate" in text:
        return UniquenessViolation(f"Uniqueness violation: {exc.orig}")
    if "foreign key" in text:
        return ReferentialViolation(f"Referential violation: {exc.orig}")
    return ConstraintViolation(f"Constraint violation: {exc.orig}")
