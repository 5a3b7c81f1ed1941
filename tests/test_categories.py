import pytest

from core.exceptions import CycleDetected, RecordNotFound, ReferentialViolation, UniquenessViolation
from models.category import Category
from services import categories as category_service


@pytest.fixture
def chain(db):
    """A > B > C"""
    a = category_service.create_category(db, "A")
    b = category_service.create_category(db, "B", parent_id=a.id)
    c = category_service.create_category(db, "C", parent_id=b.id)
    return a, b, c


class TestCategoryPath:
    """Breadcrumb resolution"""

    def test_three_levels(self, db, chain):
        a, b, c = chain
        assert category_service.get_category_path(db, c.id) == "A > B > C"
        assert category_service.get_category_path(db, b.id) == "A > B"
        assert category_service.get_category_path(db, a.id) == "A"

    def test_custom_separator(self, db, chain):
        assert category_service.get_category_path(db, chain[2].id, separator="/") == "A/B/C"

    def test_missing_category(self, db):
        with pytest.raises(RecordNotFound):
            category_service.get_category_path(db, 999)

    def test_cycle_in_stored_data(self, db, chain):
        a, b, c = chain
        # Bypass the service to plant A's parent = C
        a.parent_id = c.id
        db.commit()

        with pytest.raises(CycleDetected) as exc_info:
            category_service.get_category_path(db, c.id)

        chain_ids = exc_info.value.chain
        assert chain_ids[0] == chain_ids[-1]
        assert set(chain_ids) == {a.id, b.id, c.id}


class TestCategoryWrites:
    """Parent assignment and restrict rules"""

    def test_slug_derived(self, db):
        category = category_service.create_category(db, "Rain Jackets")
        assert category.slug == "rain-jackets"

    def test_duplicate_name(self, db, chain):
        with pytest.raises(UniquenessViolation):
            category_service.create_category(db, "A", slug="a-again")

    def test_duplicate_slug(self, db, chain):
        with pytest.raises(UniquenessViolation):
            category_service.create_category(db, "A!")

    def test_missing_parent(self, db):
        with pytest.raises(ReferentialViolation):
            category_service.create_category(db, "Orphan", parent_id=999)

    def test_cannot_become_own_parent(self, db, chain):
        a = chain[0]
        with pytest.raises(CycleDetected):
            category_service.update_category(db, a.id, parent_id=a.id)

    def test_cannot_move_under_descendant(self, db, chain):
        a, b, c = chain
        with pytest.raises(CycleDetected):
            category_service.update_category(db, a.id, parent_id=c.id)

        assert db.get(Category, a.id).parent_id is None

    def test_reparent(self, db, chain):
        a, b, c = chain
        category_service.update_category(db, c.id, parent_id=a.id)

        assert category_service.get_category_path(db, c.id) == "A > C"

    def test_delete_with_children_blocked(self, db, chain):
        with pytest.raises(ReferentialViolation):
            category_service.delete_category(db, chain[0].id)

    def test_delete_with_products_blocked(self, db, product, category):
        with pytest.raises(ReferentialViolation):
            category_service.delete_category(db, category.id)

    def test_delete_leaf(self, db, chain):
        category_service.delete_category(db, chain[2].id)

        assert [c.name for c in category_service.list_categories(db)] == ["A", "B"]
