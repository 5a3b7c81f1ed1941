from datetime import date
from decimal import Decimal
from pydantic import BaseModel
from typing import List, Optional


class AttributeCategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    display_order: int = 0
    is_active: bool = True
    icon_class: Optional[str] = None


class AttributeCategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    display_order: int
    is_active: bool

    class Config:
        from_attributes = True


class AttributeCategoryCount(BaseModel):
    category_id: int
    category_name: str
    category_description: Optional[str] = None
    attributes_count: int


class AttributeTypeCreate(BaseModel):
    category_id: int
    name: str
    description: Optional[str] = None
    data_type: str = "text"
    is_required: bool = False
    is_filterable: bool = True
    is_comparable: bool = True
    display_order: int = 0
    default_value: Optional[str] = None
    validation_regex: Optional[str] = None
    unit_of_measure: Optional[str] = None
    allowed_values: Optional[List[str]] = None
    search_weight: int = 1
    is_active: bool = True


class AttributeTypeUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    data_type: Optional[str] = None
    is_required: Optional[bool] = None
    is_filterable: Optional[bool] = None
    is_comparable: Optional[bool] = None
    display_order: Optional[int] = None
    default_value: Optional[str] = None
    validation_regex: Optional[str] = None
    unit_of_measure: Optional[str] = None
    allowed_values: Optional[List[str]] = None
    search_weight: Optional[int] = None
    is_active: Optional[bool] = None


class AttributeTypeOut(BaseModel):
    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    data_type: str
    is_required: bool
    is_filterable: bool
    is_comparable: bool
    display_order: int
    validation_regex: Optional[str] = None
    unit_of_measure: Optional[str] = None
    allowed_values: Optional[List[str]] = None
    search_weight: int
    is_active: bool

    class Config:
        from_attributes = True


class AttributeValueCheck(BaseModel):
    value: str


class AttributeValueResult(BaseModel):
    attribute_type_id: int
    value: str
    is_valid: bool


class ProductAttributeSet(BaseModel):
    value: str
    validate_value: bool = True
    display_order: Optional[int] = None
    is_filterable: Optional[bool] = None
    is_visible: Optional[bool] = None


class ProductAttributeOut(BaseModel):
    id: int
    product_id: int
    attribute_type_id: int
    value: str
    value_numeric: Optional[Decimal] = None
    value_date: Optional[date] = None
    value_boolean: Optional[bool] = None
    display_order: int
    is_filterable: bool
    is_visible: bool

    class Config:
        from_attributes = True


class FormattedAttributeOut(BaseModel):
    category_name: str
    attribute_name: str
    value: str
    unit_of_measure: Optional[str] = None
