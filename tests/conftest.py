from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from core.db import Base, enable_sqlite_foreign_keys, get_db
from models.attribute import AttributeCategory, AttributeType
from models.brand import Brand
from models.category import Category
from models.product import Product
from models.size import SizeCategory, SizeOption


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    with engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    """Create a fresh database for each test."""
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    db_session = TestingSessionLocal()
    yield db_session
    db_session.close()


@pytest.fixture()
def client(db):
    """Test client whose requests share the test's session."""

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def brand(db):
    brand = Brand(name="Acme Outdoors", slug="acme-outdoors")
    db.add(brand)
    db.commit()
    db.refresh(brand)
    return brand


@pytest.fixture
def category(db):
    category = Category(name="Jackets", slug="jackets")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def product(db, brand, category):
    product = Product(
        name="Trail Shell",
        sku="TS-001",
        slug="trail-shell",
        brand_id=brand.id,
        category_id=category.id,
        base_price=Decimal("129.00"),
        currency="USD",
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def clothing_sizes(db):
    """Clothing size category with S, M and L options."""
    size_category = SizeCategory(name="Clothing", display_order=10, measurement_unit="international")
    db.add(size_category)
    db.flush()
    options = [
        SizeOption(size_category_id=size_category.id, name=name, code=code, display_order=order)
        for name, code, order in (("Small", "S", 20), ("Medium", "M", 30), ("Large", "L", 40))
    ]
    db.add_all(options)
    db.commit()
    return options


@pytest.fixture
def attribute_category(db):
    category = AttributeCategory(name="Technical", description="Technical specifications", display_order=10)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def attribute_types(db, attribute_category):
    """One attribute type per data kind, keyed by kind."""
    types = {
        "numeric": AttributeType(
            category_id=attribute_category.id, name="Memory (RAM)", data_type="numeric", unit_of_measure="GB",
            display_order=2,
        ),
        "date": AttributeType(category_id=attribute_category.id, name="Release Date", data_type="date"),
        "boolean": AttributeType(category_id=attribute_category.id, name="Eco-Friendly", data_type="boolean"),
        "select": AttributeType(
            category_id=attribute_category.id, name="Operating System", data_type="select",
            allowed_values=["Android", "iOS", "Windows"], display_order=1,
        ),
        "multiselect": AttributeType(
            category_id=attribute_category.id, name="Connectivity", data_type="multiselect",
            allowed_values=["WiFi", "Bluetooth", "NFC"],
        ),
        "text": AttributeType(
            category_id=attribute_category.id, name="Model Number", data_type="text",
            validation_regex=r"^[A-Z]{2}-\d+$",
        ),
    }
    db.add_all(types.values())
    db.commit()
    return types
