"""
Reference data every catalog starts with: size categories with their clothing
and shoe sizes, and the attribute categories and types.

Rows are matched by name (size options by category and code) so running the
seed again only adds what is missing.
"""
from sqlalchemy.orm import Session

from core.db import transaction
from core.logging_config import get_logger
from models.attribute import AttributeCategory, AttributeType
from models.size import SizeCategory, SizeOption

logger = get_logger(__name__)

SIZE_CATEGORIES = [
    ("Clothing", 10, "international"),
    ("Shoes", 20, "eu"),
    ("Hats", 30, "cm"),
    ("Gloves", 40, "cm"),
    ("Children's Clothing", 50, "cm"),
    ("Children's Shoes", 60, "eu"),
    ("Accessories", 70, "cm"),
    ("Electronics", 80, "inches"),
]

SIZE_OPTIONS = {
    "Clothing": [
        ("Extra Small", "XS", 10, {"chest": 86, "waist": 71, "hips": 89}, {"us": "XS", "uk": "XS", "eu": "XS"}),
        ("Small", "S", 20, {"chest": 91, "waist": 76, "hips": 94}, {"us": "S", "uk": "S", "eu": "S"}),
        ("Medium", "M", 30, {"chest": 97, "waist": 81, "hips": 99}, {"us": "M", "uk": "M", "eu": "M"}),
        ("Large", "L", 40, {"chest": 104, "waist": 86, "hips": 104}, {"us": "L", "uk": "L", "eu": "L"}),
        ("Extra Large", "XL", 50, {"chest": 111, "waist": 94, "hips": 109}, {"us": "XL", "uk": "XL", "eu": "XL"}),
        ("XXL", "XXL", 60, {"chest": 119, "waist": 102, "hips": 117}, {"us": "XXL", "uk": "XXL", "eu": "XXL"}),
    ],
    "Shoes": [
        ("EU 37", "37", 10, {"length": 23.5}, {"us": "6", "uk": "4", "cm": "23.5"}),
        ("EU 38", "38", 20, {"length": 24.0}, {"us": "7", "uk": "5", "cm": "24.0"}),
        ("EU 39", "39", 30, {"length": 24.5}, {"us": "7.5", "uk": "5.5", "cm": "24.5"}),
        ("EU 40", "40", 40, {"length": 25.0}, {"us": "8", "uk": "6", "cm": "25.0"}),
        ("EU 41", "41", 50, {"length": 26.0}, {"us": "9", "uk": "7", "cm": "26.0"}),
        ("EU 42", "42", 60, {"length": 26.5}, {"us": "9.5", "uk": "7.5", "cm": "26.5"}),
        ("EU 43", "43", 70, {"length": 27.0}, {"us": "10", "uk": "8", "cm": "27.0"}),
        ("EU 44", "44", 80, {"length": 28.0}, {"us": "11", "uk": "9", "cm": "28.0"}),
    ],
}

ATTRIBUTE_CATEGORIES = [
    ("Technical", "Technical specifications and features", 10),
    ("Physical", "Physical characteristics and dimensions", 20),
    ("Material", "Material composition and details", 30),
    ("Performance", "Performance metrics and ratings", 40),
    ("Environmental", "Environmental certifications and properties", 50),
    ("Care", "Care instructions and maintenance", 60),
    ("Warranty", "Warranty information and support", 70),
    ("Compatibility", "Compatibility with other products or systems", 80),
]

# (category, name, description, data_type, is_filterable, is_comparable, unit, allowed_values)
ATTRIBUTE_TYPES = [
    ("Technical", "Operating System", "Operating system or platform", "select", True, True, None,
     ["Android", "iOS", "Windows", "macOS", "Linux", "ChromeOS"]),
    ("Technical", "Processor", "CPU or processor details", "text", True, True, None, None),
    ("Technical", "Memory (RAM)", "Random access memory capacity", "numeric", True, True, "GB", None),
    ("Technical", "Storage Capacity", "Storage size or capacity", "numeric", True, True, "GB", None),
    ("Technical", "Screen Size", "Display diagonal size", "numeric", True, True, "inches", None),
    ("Technical", "Resolution", "Screen or image resolution", "text", True, True, "pixels", None),
    ("Technical", "Connectivity", "Available connectivity options", "multiselect", True, False, None,
     ["WiFi", "Bluetooth", "USB-C", "Lightning", "HDMI", "Ethernet", "5G", "4G/LTE", "NFC"]),
    ("Physical", "Color", "Product color", "text", True, False, None, None),
    ("Physical", "Material", "Main material", "multiselect", True, False, None,
     ["Cotton", "Polyester", "Wool", "Silk", "Leather", "Aluminum", "Steel", "Glass", "Plastic"]),
    ("Physical", "Weight", "Product weight", "numeric", True, True, "kg", None),
    ("Physical", "Dimensions", "Product dimensions (L × W × H)", "text", False, False, None, None),
    ("Material", "Main Material", "Primary material used", "text", True, False, None, None),
    ("Material", "Material Composition", "Breakdown of material components", "text", False, False, "percentage", None),
    ("Material", "Fabric Weight", "Weight of the fabric", "numeric", True, True, "g/m²", None),
    ("Performance", "Battery Life", "Estimated battery duration", "numeric", True, True, "hours", None),
    ("Performance", "Water Resistance", "Water resistance rating", "text", True, False, None, None),
    ("Performance", "Durability Rating", "Product durability score", "numeric", True, True, None, None),
    ("Environmental", "Eco-Friendly", "Environmentally friendly product", "boolean", True, False, None, None),
    ("Environmental", "Energy Efficiency", "Energy efficiency rating", "text", True, True, None,
     ["A+++", "A++", "A+", "A", "B", "C", "D", "E", "F", "G"]),
    ("Environmental", "Recycled Content", "Percentage of recycled materials", "numeric", True, True, "%", None),
    ("Care", "Washing Instructions", "How to wash the product", "multiselect", False, False, None,
     ["Machine wash cold", "Machine wash warm", "Hand wash only", "Dry clean only", "Do not wash"]),
    ("Care", "Drying Instructions", "How to dry the product", "select", False, False, None,
     ["Tumble dry low", "Tumble dry medium", "Tumble dry high", "Air dry", "Do not tumble dry"]),
    ("Warranty", "Warranty Period", "Duration of the warranty", "numeric", True, True, "months", None),
    ("Warranty", "Warranty Type", "Type of warranty coverage", "select", True, False, None,
     ["Limited", "Lifetime", "Extended", "Parts only", "Labor only", "Parts and labor"]),
    ("Compatibility", "Compatible With", "Compatible devices or systems", "multiselect", True, False, None, None),
    ("Compatibility", "Required Accessories", "Accessories needed for full functionality", "text", False, False, None, None),
]


def seed_reference_data(db: Session) -> dict:
    """Insert the missing reference rows and return how many of each kind were added."""
    added = {"size_categories": 0, "size_options": 0, "attribute_categories": 0, "attribute_types": 0}

    with transaction(db):
        size_categories = {category.name: category for category in db.query(SizeCategory).all()}
        for name, display_order, unit in SIZE_CATEGORIES:
            if name not in size_categories:
                category = SizeCategory(name=name, display_order=display_order, measurement_unit=unit)
                db.add(category)
                size_categories[name] = category
                added["size_categories"] += 1
        db.flush()

        for category_name, options in SIZE_OPTIONS.items():
            category = size_categories[category_name]
            existing = {
                code for (code,) in db.query(SizeOption.code).filter(SizeOption.size_category_id == category.id)
            }
            for name, code, display_order, dimensions, equivalent in options:
                if code in existing:
                    continue
                db.add(SizeOption(
                    size_category_id=category.id,
                    name=name,
                    code=code,
                    display_order=display_order,
                    dimensions=dimensions,
                    equivalent_sizes=equivalent,
                ))
                added["size_options"] += 1

        attribute_categories = {category.name: category for category in db.query(AttributeCategory).all()}
        for name, description, display_order in ATTRIBUTE_CATEGORIES:
            if name not in attribute_categories:
                category = AttributeCategory(name=name, description=description, display_order=display_order)
                db.add(category)
                attribute_categories[name] = category
                added["attribute_categories"] += 1
        db.flush()

        existing_types = {name for (name,) in db.query(AttributeType.name)}
        for category_name, name, description, data_type, filterable, comparable, unit, allowed in ATTRIBUTE_TYPES:
            if name in existing_types:
                continue
            db.add(AttributeType(
                category_id=attribute_categories[category_name].id,
                name=name,
                description=description,
                data_type=data_type,
                is_required=False,
                is_filterable=filterable,
                is_comparable=comparable,
                unit_of_measure=unit,
                allowed_values=allowed,
            ))
            added["attribute_types"] += 1

    logger.info("Seeded reference data: %s", added)
    return added
