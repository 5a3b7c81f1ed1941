from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel
from typing import Optional


class ProductCreate(BaseModel):
    name: str
    sku: str
    brand_id: int
    category_id: int
    base_price: Decimal
    slug: Optional[str] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    tax_rate: Optional[Decimal] = None
    weight_kg: Optional[Decimal] = None
    length_cm: Optional[Decimal] = None
    width_cm: Optional[Decimal] = None
    height_cm: Optional[Decimal] = None
    is_featured: bool = False
    is_active: bool = True
    stock_status: str = "in_stock"
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    release_date: Optional[date] = None
    discontinued_date: Optional[date] = None
    average_rating: Optional[Decimal] = None
    review_count: int = 0


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    slug: Optional[str] = None
    brand_id: Optional[int] = None
    category_id: Optional[int] = None
    base_price: Optional[Decimal] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    tax_rate: Optional[Decimal] = None
    weight_kg: Optional[Decimal] = None
    length_cm: Optional[Decimal] = None
    width_cm: Optional[Decimal] = None
    height_cm: Optional[Decimal] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    stock_status: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    release_date: Optional[date] = None
    discontinued_date: Optional[date] = None
    average_rating: Optional[Decimal] = None
    review_count: Optional[int] = None


class ProductOut(BaseModel):
    id: int
    name: str
    sku: str
    slug: str
    brand_id: int
    category_id: int
    base_price: Decimal
    currency: str
    description: Optional[str] = None
    is_featured: bool
    is_active: bool
    stock_status: str
    average_rating: Optional[Decimal] = None
    review_count: int
    release_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ImageCreate(BaseModel):
    image_url: str
    alt_text: Optional[str] = None
    display_order: int = 0
    is_primary: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    file_size_kb: Optional[int] = None
    file_type: Optional[str] = None
    caption: Optional[str] = None
    copyright_info: Optional[str] = None


class ImageUpdate(BaseModel):
    image_url: Optional[str] = None
    alt_text: Optional[str] = None
    display_order: Optional[int] = None
    is_primary: Optional[bool] = None
    caption: Optional[str] = None
    copyright_info: Optional[str] = None


class ImageOut(BaseModel):
    id: int
    product_id: int
    image_url: str
    alt_text: Optional[str] = None
    display_order: int
    is_primary: bool
    file_type: Optional[str] = None
    caption: Optional[str] = None

    class Config:
        from_attributes = True
