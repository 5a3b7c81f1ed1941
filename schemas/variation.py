from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from typing import Optional


class VariationCreate(BaseModel):
    sku: str
    size_option_id: Optional[int] = None
    color_code: Optional[str] = None
    color_name: Optional[str] = None
    additional_price: Decimal = Decimal("0.00")
    stock_quantity: int = 0
    low_stock_threshold: Optional[int] = None
    weight_diff_kg: Decimal = Decimal("0")
    is_active: bool = True
    image_url: Optional[str] = None
    custom_attributes: Optional[dict] = None
    barcode: Optional[str] = None
    location_code: Optional[str] = None


class VariationUpdate(BaseModel):
    sku: Optional[str] = None
    size_option_id: Optional[int] = None
    color_code: Optional[str] = None
    color_name: Optional[str] = None
    additional_price: Optional[Decimal] = None
    stock_quantity: Optional[int] = None
    low_stock_threshold: Optional[int] = None
    weight_diff_kg: Optional[Decimal] = None
    is_active: Optional[bool] = None
    image_url: Optional[str] = None
    custom_attributes: Optional[dict] = None
    barcode: Optional[str] = None
    location_code: Optional[str] = None


class VariationOut(BaseModel):
    id: int
    product_id: int
    size_option_id: Optional[int] = None
    sku: str
    color_code: Optional[str] = None
    color_name: Optional[str] = None
    additional_price: Decimal
    stock_quantity: int
    low_stock_threshold: int
    is_active: bool
    is_low_stock: bool

    class Config:
        from_attributes = True


class StockSet(BaseModel):
    quantity: int
    change_type: str = "adjustment"
    changed_by: Optional[str] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None


class StockAdjust(BaseModel):
    delta: int
    change_type: str = "adjustment"
    changed_by: Optional[str] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None


class StockLogOut(BaseModel):
    id: int
    variation_id: int
    previous_quantity: int
    new_quantity: int
    change_amount: int
    change_type: str
    reference_id: Optional[str] = None
    notes: Optional[str] = None
    changed_by: Optional[str] = None
    changed_at: datetime

    class Config:
        from_attributes = True


class LowStockOut(BaseModel):
    variation_id: int
    product_name: str
    sku: str
    current_stock: int
    threshold: int


class AvailableSizeOut(BaseModel):
    size_option_id: int
    size_name: str
    size_code: str
    stock_quantity: int
    is_available: bool
