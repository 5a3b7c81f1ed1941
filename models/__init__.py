# Import models so that SQLAlchemy metadata includes them on app startup
from .brand import Brand  # noqa: F401
from .category import Category  # noqa: F401
from .product import Product  # noqa: F401
from .image import ProductImage  # noqa: F401
from .size import SizeCategory, SizeOption  # noqa: F401
from .variation import ProductVariation, StockLogEntry, StockChange  # noqa: F401
from .attribute import AttributeCategory, AttributeType, ProductAttribute  # noqa: F401

# Registers the flush-time catalog rules
from . import events  # noqa: F401,E402
