"""
Session hooks that keep derived catalog state in step with the write that caused it.

Both hooks run in ``before_flush``, so whatever they add or change is written
by the same flush, inside the same transaction, as the triggering change:

* a changed ``ProductVariation.stock_quantity`` appends one ``StockLogEntry``;
* a new or changed ``ProductAttribute`` value gets its typed projection
  recomputed from the attribute type's data kind.

Stock log entries are append-only: modifying or deleting one through the ORM
aborts the flush. A rollback drops any stock change that was waiting for a
flush, so it cannot be stamped on a later, unrelated write.
"""
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ConstraintViolation
from core.logging_config import get_logger
from models.attribute import AttributeType, ProductAttribute
from models.values import cast_attribute_value
from models.variation import ProductVariation, StockChange, StockLogEntry

logger = get_logger(__name__)


def _append_stock_log(session: Session, variation: ProductVariation) -> None:
    history = inspect(variation).attrs.stock_quantity.history
    change = variation.pending_stock_change or StockChange()
    variation.pending_stock_change = None
    if not history.has_changes() or not history.deleted:
        return

    previous = history.deleted[0]
    current = variation.stock_quantity
    if previous is None or previous == current:
        return

    entry = StockLogEntry(
        variation_id=variation.id,
        previous_quantity=previous,
        new_quantity=current,
        change_amount=current - previous,
        change_type=change.change_type,
        reference_id=change.reference_id,
        notes=change.notes,
        changed_by=change.changed_by or settings.CATALOG_ACTOR,
    )
    session.add(entry)
    logger.info(
        "Stock of variation %s changed %s -> %s (%s by %s)",
        variation.id, previous, current, entry.change_type, entry.changed_by,
    )


def _project_attribute_value(session: Session, attribute: ProductAttribute) -> None:
    state = inspect(attribute)
    if state.persistent:
        changed = state.attrs.value.history.has_changes() or state.attrs.attribute_type_id.history.has_changes()
        if not changed:
            return

    attribute_type = attribute.attribute_type
    if attribute_type is None or attribute_type.id != attribute.attribute_type_id:
        attribute_type = session.get(AttributeType, attribute.attribute_type_id)
    if attribute_type is None:
        # Left for the foreign key to reject
        return

    projection = cast_attribute_value(attribute_type.data_type, attribute.value)
    for column, value in projection.as_columns().items():
        setattr(attribute, column, value)
    if projection.cast_failed:
        logger.warning(
            "Attribute type %s (%s) could not cast %r; keeping raw text only",
            attribute_type.id, attribute_type.data_type, attribute.value,
        )


@event.listens_for(Session, "before_flush")
def apply_catalog_rules(session, flush_context, instances):
    for obj in session.deleted:
        if isinstance(obj, StockLogEntry):
            raise ConstraintViolation("Stock log entries cannot be deleted")

    for obj in list(session.dirty):
        if isinstance(obj, StockLogEntry) and session.is_modified(obj):
            raise ConstraintViolation("Stock log entries cannot be modified")
        if isinstance(obj, ProductVariation):
            _append_stock_log(session, obj)
        elif isinstance(obj, ProductAttribute):
            _project_attribute_value(session, obj)

    for obj in list(session.new):
        if isinstance(obj, ProductAttribute):
            _project_attribute_value(session, obj)


@event.listens_for(Session, "after_soft_rollback")
def discard_pending_stock_changes(session, previous_transaction):
    for obj in list(session.identity_map.values()):
        if isinstance(obj, ProductVariation):
            obj.pending_stock_change = None
