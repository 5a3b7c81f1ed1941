from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from typing import Optional


class BrandCreate(BaseModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    founded_year: Optional[int] = None
    country_of_origin: Optional[str] = None
    is_active: bool = True
    featured_priority: int = 0
    brand_color: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class BrandUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    founded_year: Optional[int] = None
    country_of_origin: Optional[str] = None
    is_active: Optional[bool] = None
    featured_priority: Optional[int] = None
    brand_color: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class BrandOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    founded_year: Optional[int] = None
    country_of_origin: Optional[str] = None
    is_active: bool
    featured_priority: int
    brand_color: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BrandStatistics(BaseModel):
    brand_id: int
    total_products: int
    active_products: int
    product_categories: int
    avg_price: Optional[Decimal] = None
