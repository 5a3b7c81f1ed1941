from pydantic import BaseModel
from typing import Optional


class SizeCategoryCreate(BaseModel):
    name: str
    display_order: int = 0
    size_guide_url: Optional[str] = None
    measurement_unit: str = "cm"
    is_active: bool = True
    notes: Optional[str] = None


class SizeCategoryOut(BaseModel):
    id: int
    name: str
    display_order: int
    size_guide_url: Optional[str] = None
    measurement_unit: str
    is_active: bool

    class Config:
        from_attributes = True


class SizeOptionCreate(BaseModel):
    name: str
    code: str
    display_order: int = 0
    dimensions: Optional[dict] = None
    equivalent_sizes: Optional[dict] = None
    is_active: bool = True


class SizeOptionUpdate(BaseModel):
    size_category_id: Optional[int] = None
    name: Optional[str] = None
    code: Optional[str] = None
    display_order: Optional[int] = None
    dimensions: Optional[dict] = None
    equivalent_sizes: Optional[dict] = None
    is_active: Optional[bool] = None


class SizeOptionOut(BaseModel):
    id: int
    size_category_id: int
    name: str
    code: str
    display_order: int
    dimensions: Optional[dict] = None
    equivalent_sizes: Optional[dict] = None
    is_active: bool

    class Config:
        from_attributes = True
