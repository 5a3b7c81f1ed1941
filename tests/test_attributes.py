from datetime import date
from decimal import Decimal

import pytest

from core.exceptions import ConstraintViolation, RecordNotFound, ReferentialViolation, UniquenessViolation, ValidationFailure
from models.attribute import AttributeType, ProductAttribute
from models.values import cast_attribute_value
from services import attributes as attribute_service


class TestAttributeValidation:
    """Validation chain per data kind"""

    def test_numeric(self, db, attribute_types):
        type_id = attribute_types["numeric"].id
        assert attribute_service.validate_attribute_value(db, type_id, "42.5") is True
        assert attribute_service.validate_attribute_value(db, type_id, "-3") is True
        assert attribute_service.validate_attribute_value(db, type_id, "1e3") is True
        assert attribute_service.validate_attribute_value(db, type_id, "forty") is False
        assert attribute_service.validate_attribute_value(db, type_id, "1_000") is False

    def test_boolean(self, db, attribute_types):
        type_id = attribute_types["boolean"].id
        for token in ("true", "FALSE", "Yes", "no", "1", "0"):
            assert attribute_service.validate_attribute_value(db, type_id, token) is True
        assert attribute_service.validate_attribute_value(db, type_id, "maybe") is False

    def test_date(self, db, attribute_types):
        type_id = attribute_types["date"].id
        assert attribute_service.validate_attribute_value(db, type_id, "2024-03-01") is True
        assert attribute_service.validate_attribute_value(db, type_id, "2024-02-30") is False
        assert attribute_service.validate_attribute_value(db, type_id, "next tuesday") is False
        assert attribute_service.validate_attribute_value(db, type_id, "20240301") is False
        assert attribute_service.validate_attribute_value(db, type_id, "2024-W10-5") is False
        assert attribute_service.validate_attribute_value(db, type_id, "2024-3-1") is False

    def test_select(self, db, attribute_types):
        type_id = attribute_types["select"].id
        assert attribute_service.validate_attribute_value(db, type_id, "Android") is True
        assert attribute_service.validate_attribute_value(db, type_id, "android") is False
        assert attribute_service.validate_attribute_value(db, type_id, "Symbian") is False

    def test_multiselect(self, db, attribute_category):
        platforms = attribute_service.create_attribute_type(
            db, attribute_category.id, "Platforms", data_type="multiselect", allowed_values=["Android", "iOS"]
        )
        assert attribute_service.validate_attribute_value(db, platforms.id, "Android,iOS") is True
        assert attribute_service.validate_attribute_value(db, platforms.id, "Android") is True
        assert attribute_service.validate_attribute_value(db, platforms.id, "Android,Nokia") is False

    def test_multiselect_tokens_are_not_trimmed(self, db, attribute_types):
        type_id = attribute_types["multiselect"].id
        assert attribute_service.validate_attribute_value(db, type_id, "WiFi,NFC") is True
        assert attribute_service.validate_attribute_value(db, type_id, "WiFi, NFC") is False

    def test_select_without_allowed_values_accepts_anything(self, db, attribute_category):
        free_select = attribute_service.create_attribute_type(db, attribute_category.id, "Finish", data_type="select")
        assert attribute_service.validate_attribute_value(db, free_select.id, "Matte") is True

        empty_select = attribute_service.create_attribute_type(
            db, attribute_category.id, "Texture", data_type="select", allowed_values=[]
        )
        assert attribute_service.validate_attribute_value(db, empty_select.id, "Ribbed") is True

    def test_regex(self, db, attribute_types):
        type_id = attribute_types["text"].id
        assert attribute_service.validate_attribute_value(db, type_id, "AB-123") is True
        assert attribute_service.validate_attribute_value(db, type_id, "ab-123") is False

    def test_regex_applies_after_kind_rule(self, db, attribute_category):
        even = attribute_service.create_attribute_type(
            db, attribute_category.id, "Even Count", data_type="numeric", validation_regex=r"[02468]$"
        )
        assert attribute_service.validate_attribute_value(db, even.id, "24") is True
        assert attribute_service.validate_attribute_value(db, even.id, "23") is False
        assert attribute_service.validate_attribute_value(db, even.id, "two") is False

    def test_unknown_attribute_type(self, db):
        with pytest.raises(RecordNotFound):
            attribute_service.validate_attribute_value(db, 999, "anything")


class TestTypedProjection:
    """Typed columns stored next to the raw text"""

    def test_cast_helpers(self):
        assert cast_attribute_value("numeric", "16").typed == Decimal("16")
        assert cast_attribute_value("date", "2024-03-01").typed == date(2024, 3, 1)
        assert cast_attribute_value("boolean", "No").typed is False
        assert cast_attribute_value("text", "Gore-Tex").typed == "Gore-Tex"
        assert cast_attribute_value("numeric", "lots").cast_failed is True
        assert cast_attribute_value("select", "Android").cast_failed is False

    def test_numeric_projection(self, db, product, attribute_types):
        attribute = attribute_service.set_product_attribute(db, product.id, attribute_types["numeric"].id, "16")

        assert attribute.value == "16"
        assert attribute.value_numeric == Decimal("16")
        assert attribute.value_date is None
        assert attribute.value_boolean is None

    def test_date_and_boolean_projection(self, db, product, attribute_types):
        released = attribute_service.set_product_attribute(db, product.id, attribute_types["date"].id, "2024-03-01")
        eco = attribute_service.set_product_attribute(db, product.id, attribute_types["boolean"].id, "Yes")

        assert released.value_date == date(2024, 3, 1)
        assert eco.value_boolean is True

    def test_text_kinds_have_no_projection(self, db, product, attribute_types):
        attribute = attribute_service.set_product_attribute(db, product.id, attribute_types["select"].id, "iOS")

        assert (attribute.value_numeric, attribute.value_date, attribute.value_boolean) == (None, None, None)

    def test_cast_failure_is_tolerated(self, db, product, attribute_types):
        attribute = attribute_service.set_product_attribute(
            db, product.id, attribute_types["numeric"].id, "about sixteen", validate=False
        )

        assert attribute.value == "about sixteen"
        assert attribute.value_numeric is None

    def test_projection_follows_value(self, db, product, attribute_types):
        type_id = attribute_types["numeric"].id
        attribute_service.set_product_attribute(db, product.id, type_id, "8")
        attribute = attribute_service.set_product_attribute(db, product.id, type_id, "32")

        assert attribute.value_numeric == Decimal("32")


class TestProductAttributeWrites:
    """One row per (product, attribute type)"""

    def test_upsert_keeps_one_row(self, db, product, attribute_types):
        type_id = attribute_types["select"].id
        first = attribute_service.set_product_attribute(db, product.id, type_id, "Android")
        second = attribute_service.set_product_attribute(db, product.id, type_id, "iOS", display_order=3)

        rows = db.query(ProductAttribute).filter(
            ProductAttribute.product_id == product.id, ProductAttribute.attribute_type_id == type_id
        ).all()
        assert len(rows) == 1
        assert first.id == second.id
        assert rows[0].value == "iOS"
        assert rows[0].display_order == 3

    def test_invalid_value_is_not_written(self, db, product, attribute_types):
        type_id = attribute_types["boolean"].id

        with pytest.raises(ValidationFailure) as exc_info:
            attribute_service.set_product_attribute(db, product.id, type_id, "maybe")

        assert exc_info.value.attribute_type_id == type_id
        assert exc_info.value.value == "maybe"
        assert attribute_service.list_product_attributes(db, product.id) == []

    def test_invalid_value_keeps_previous(self, db, product, attribute_types):
        type_id = attribute_types["boolean"].id
        attribute_service.set_product_attribute(db, product.id, type_id, "yes")

        with pytest.raises(ValidationFailure):
            attribute_service.set_product_attribute(db, product.id, type_id, "maybe")

        assert attribute_service.list_product_attributes(db, product.id)[0].value == "yes"

    def test_missing_references(self, db, product, attribute_types):
        with pytest.raises(ReferentialViolation):
            attribute_service.set_product_attribute(db, 999, attribute_types["text"].id, "AB-1")
        with pytest.raises(ReferentialViolation):
            attribute_service.set_product_attribute(db, product.id, 999, "AB-1")

    def test_delete(self, db, product, attribute_types):
        type_id = attribute_types["text"].id
        attribute_service.set_product_attribute(db, product.id, type_id, "AB-1")

        attribute_service.delete_product_attribute(db, product.id, type_id)

        assert attribute_service.list_product_attributes(db, product.id) == []


class TestAttributeQueries:
    """Read-side attribute queries"""

    def test_formatted_attributes(self, db, product, attribute_types):
        attribute_service.set_product_attribute(db, product.id, attribute_types["numeric"].id, "16")
        attribute_service.set_product_attribute(db, product.id, attribute_types["select"].id, "Android")
        attribute_service.set_product_attribute(
            db, product.id, attribute_types["text"].id, "AB-1", is_visible=False
        )

        rows = attribute_service.get_formatted_product_attributes(db, product.id)

        assert rows == [
            {"category_name": "Technical", "attribute_name": "Operating System", "value": "Android", "unit_of_measure": None},
            {"category_name": "Technical", "attribute_name": "Memory (RAM)", "value": "16", "unit_of_measure": "GB"},
        ]

    def test_types_by_category(self, db, attribute_category, attribute_types):
        attribute_types["date"].is_active = False
        db.commit()

        names = [t.name for t in attribute_service.get_attribute_types_by_category(db, attribute_category.id)]

        assert names == ["Connectivity", "Eco-Friendly", "Model Number", "Operating System", "Memory (RAM)"]

    def test_categories_with_count(self, db, attribute_category, attribute_types):
        attribute_service.create_attribute_category(db, "Warranty", display_order=70)

        rows = attribute_service.get_attribute_categories_with_count(db)

        assert [(row["category_name"], row["attributes_count"]) for row in rows] == [
            ("Technical", 6),
            ("Warranty", 0),
        ]


class TestAttributeSchema:
    """Attribute category and type writes"""

    def test_duplicate_type_name(self, db, attribute_category, attribute_types):
        with pytest.raises(UniquenessViolation):
            attribute_service.create_attribute_type(db, attribute_category.id, "Connectivity")

    def test_invalid_regex(self, db, attribute_category):
        with pytest.raises(ConstraintViolation):
            attribute_service.create_attribute_type(db, attribute_category.id, "Broken", validation_regex="(")

    def test_unknown_data_type(self, db, attribute_category):
        with pytest.raises(ConstraintViolation):
            attribute_service.create_attribute_type(db, attribute_category.id, "Colour", data_type="colour")
        assert db.query(AttributeType).count() == 0

    def test_missing_category(self, db):
        with pytest.raises(ReferentialViolation):
            attribute_service.create_attribute_type(db, 999, "Orphan")

    def test_changing_data_kind_reprojects_values(self, db, product, attribute_category):
        storage = attribute_service.create_attribute_type(db, attribute_category.id, "Storage", data_type="text")
        attribute = attribute_service.set_product_attribute(db, product.id, storage.id, "16")
        assert attribute.value_numeric is None

        attribute_service.update_attribute_type(db, storage.id, data_type="numeric")

        db.refresh(attribute)
        assert attribute.value == "16"
        assert attribute.value_numeric == Decimal("16")

        attribute_service.update_attribute_type(db, storage.id, data_type="select")

        db.refresh(attribute)
        assert attribute.value_numeric is None
