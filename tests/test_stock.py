import pytest

from core.config import settings
from core.exceptions import ConstraintViolation, ReferentialViolation, UniquenessViolation
from models.variation import ProductVariation, StockChange, StockLogEntry
from services import stock as stock_service


@pytest.fixture
def variation(db, product):
    return stock_service.create_variation(db, product.id, "TS-001-M", stock_quantity=10)


def ledger(db, variation_id):
    return db.query(StockLogEntry).filter(StockLogEntry.variation_id == variation_id).order_by(StockLogEntry.id).all()


class TestStockLedger:
    """Every stock change leaves exactly one ledger entry"""

    def test_opening_stock_is_not_logged(self, db, variation):
        assert variation.stock_quantity == 10
        assert ledger(db, variation.id) == []

    def test_set_stock_appends_entry(self, db, variation):
        stock_service.set_stock_quantity(db, variation.id, 7, change_type="sale", reference_id="ORD-1")

        entries = ledger(db, variation.id)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.previous_quantity == 10
        assert entry.new_quantity == 7
        assert entry.change_amount == -3
        assert entry.change_type == "sale"
        assert entry.reference_id == "ORD-1"
        assert entry.changed_by == settings.CATALOG_ACTOR

    def test_ledger_sums_to_current_quantity(self, db, variation):
        stock_service.adjust_stock(db, variation.id, -4, change_type="sale")
        stock_service.adjust_stock(db, variation.id, 12, change_type="purchase", changed_by="warehouse")
        stock_service.set_stock_quantity(db, variation.id, 9, change_type="inventory")
        stock_service.adjust_stock(db, variation.id, 1, change_type="return")

        current = db.get(ProductVariation, variation.id).stock_quantity
        entries = ledger(db, variation.id)
        assert current == 10
        assert len(entries) == 4
        assert 10 + sum(entry.change_amount for entry in entries) == current
        assert [entry.change_type for entry in entries] == ["sale", "purchase", "inventory", "return"]
        assert entries[1].changed_by == "warehouse"
        # Each entry starts where the previous one ended
        for before, after in zip(entries, entries[1:]):
            assert before.new_quantity == after.previous_quantity

    def test_unchanged_quantity_is_not_logged(self, db, variation):
        stock_service.set_stock_quantity(db, variation.id, 10)
        stock_service.update_variation(db, variation.id, color_name="Forest Green")

        assert ledger(db, variation.id) == []

    def test_update_variation_logs_with_change(self, db, variation):
        change = StockChange(change_type="damaged", changed_by="qa", notes="water damage")
        stock_service.update_variation(db, variation.id, change=change, stock_quantity=8)

        entry = ledger(db, variation.id)[0]
        assert entry.change_type == "damaged"
        assert entry.changed_by == "qa"
        assert entry.notes == "water damage"
        assert entry.change_amount == -2

    def test_direct_orm_update_is_logged_as_adjustment(self, db, variation):
        variation.stock_quantity = 15
        db.commit()

        entry = ledger(db, variation.id)[0]
        assert entry.change_type == "adjustment"
        assert entry.change_amount == 5
        assert entry.changed_by == settings.CATALOG_ACTOR

    def test_negative_adjustment_rejected(self, db, variation):
        with pytest.raises(ConstraintViolation):
            stock_service.adjust_stock(db, variation.id, -11)

        assert db.get(ProductVariation, variation.id).stock_quantity == 10
        assert ledger(db, variation.id) == []

    def test_negative_quantity_rejected(self, db, variation):
        with pytest.raises(ConstraintViolation):
            stock_service.set_stock_quantity(db, variation.id, -1)

    def test_rejected_change_is_not_carried_to_next_write(self, db, variation):
        with pytest.raises(ConstraintViolation):
            stock_service.set_stock_quantity(
                db, variation.id, -1, change_type="damaged", changed_by="qa", notes="flood"
            )

        variation.stock_quantity = 12
        db.commit()

        entry = ledger(db, variation.id)[0]
        assert entry.change_type == "adjustment"
        assert entry.changed_by == settings.CATALOG_ACTOR
        assert entry.notes is None
        assert entry.change_amount == 2

    def test_rollback_discards_pending_change(self, db, variation):
        variation.set_stock(4, StockChange(change_type="lost", changed_by="qa"))
        db.rollback()

        assert variation.pending_stock_change is None
        assert variation.stock_quantity == 10

    def test_unknown_change_type_rejected(self, db, variation):
        with pytest.raises(ConstraintViolation):
            stock_service.set_stock_quantity(db, variation.id, 3, change_type="stolen")

        assert db.get(ProductVariation, variation.id).stock_quantity == 10
        assert ledger(db, variation.id) == []

    def test_entries_cannot_be_modified(self, db, variation):
        stock_service.adjust_stock(db, variation.id, -1)
        entry = ledger(db, variation.id)[0]

        entry.notes = "rewritten"
        with pytest.raises(ConstraintViolation):
            db.commit()
        db.rollback()

    def test_entries_cannot_be_deleted(self, db, variation):
        stock_service.adjust_stock(db, variation.id, -1)
        entry = ledger(db, variation.id)[0]

        db.delete(entry)
        with pytest.raises(ConstraintViolation):
            db.commit()
        db.rollback()
        assert len(ledger(db, variation.id)) == 1

    def test_deleting_variation_removes_its_ledger(self, db, variation):
        stock_service.adjust_stock(db, variation.id, -2)
        variation_id = variation.id

        stock_service.delete_variation(db, variation_id)

        assert db.query(StockLogEntry).filter(StockLogEntry.variation_id == variation_id).count() == 0

    def test_stock_history(self, db, variation):
        stock_service.adjust_stock(db, variation.id, -1)
        stock_service.adjust_stock(db, variation.id, -1)

        history = stock_service.get_stock_history(db, variation.id)
        assert [entry.new_quantity for entry in history] == [9, 8]


class TestVariations:
    """Variation writes"""

    def test_duplicate_sku_rejected(self, db, product, variation):
        with pytest.raises(UniquenessViolation):
            stock_service.create_variation(db, product.id, "TS-001-M")

    def test_missing_product_rejected(self, db):
        with pytest.raises(ReferentialViolation):
            stock_service.create_variation(db, 999, "NOPE-1")

    def test_malformed_color_rejected(self, db, product):
        with pytest.raises(ConstraintViolation):
            stock_service.create_variation(db, product.id, "TS-001-RED", color_code="red")

    def test_default_threshold(self, db, variation):
        assert variation.low_stock_threshold == settings.DEFAULT_LOW_STOCK_THRESHOLD


class TestStockReports:
    """Low-stock listing and available sizes"""

    def test_low_stock_ordered_by_quantity(self, db, product):
        stock_service.create_variation(db, product.id, "V-3", stock_quantity=3, low_stock_threshold=5)
        stock_service.create_variation(db, product.id, "V-0", stock_quantity=0, low_stock_threshold=5)
        stock_service.create_variation(db, product.id, "V-10", stock_quantity=10, low_stock_threshold=5)
        stock_service.create_variation(db, product.id, "V-OFF", stock_quantity=1, is_active=False)

        rows = stock_service.get_low_stock_variations(db)

        assert [row["sku"] for row in rows] == ["V-0", "V-3"]
        assert rows[0]["current_stock"] == 0
        assert rows[0]["threshold"] == 5
        assert rows[0]["product_name"] == product.name

    def test_threshold_is_inclusive(self, db, product):
        stock_service.create_variation(db, product.id, "V-5", stock_quantity=5, low_stock_threshold=5)

        assert [row["sku"] for row in stock_service.get_low_stock_variations(db)] == ["V-5"]

    def test_available_sizes(self, db, product, clothing_sizes):
        small, medium, large = clothing_sizes
        stock_service.create_variation(db, product.id, "TS-M", size_option_id=medium.id, stock_quantity=4)
        stock_service.create_variation(db, product.id, "TS-L", size_option_id=large.id, stock_quantity=0)

        sizes = stock_service.get_available_sizes(db, product.id)

        assert [size["size_code"] for size in sizes] == ["S", "M", "L"]
        by_code = {size["size_code"]: size for size in sizes}
        assert by_code["S"]["stock_quantity"] == 0
        assert by_code["S"]["is_available"] is False
        assert by_code["M"]["stock_quantity"] == 4
        assert by_code["M"]["is_available"] is True
        assert by_code["L"]["is_available"] is False

    def test_inactive_size_options_hidden(self, db, product, clothing_sizes):
        clothing_sizes[0].is_active = False
        db.commit()

        codes = [size["size_code"] for size in stock_service.get_available_sizes(db, product.id)]
        assert codes == ["M", "L"]
