from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from core.db import get_db
from schemas.attribute import FormattedAttributeOut, ProductAttributeOut, ProductAttributeSet
from schemas.product import ImageCreate, ImageOut, ProductCreate, ProductOut, ProductUpdate
from schemas.variation import AvailableSizeOut, VariationCreate, VariationOut
from services import attributes as attribute_service
from services import images as image_service
from services import products as product_service
from services import stock as stock_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[ProductOut])
def list_products(
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    active_only: bool = False,
    db: Session = Depends(get_db),
):
    return product_service.list_products(db, brand_id=brand_id, category_id=category_id, active_only=active_only)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    return product_service.create_product(db, **data.model_dump(exclude_none=True))


@router.get("/by-slug/{slug}", response_model=ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    return product_service.get_product_by_slug(db, slug)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return product_service.get_product(db, product_id)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    return product_service.update_product(db, product_id, **data.model_dump(exclude_unset=True))


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    return None


# Images

@router.get("/{product_id}/images", response_model=List[ImageOut])
def list_images(product_id: int, db: Session = Depends(get_db)):
    product_service.get_product(db, product_id)
    return image_service.list_images(db, product_id)


@router.post("/{product_id}/images", response_model=ImageOut, status_code=201)
def add_image(product_id: int, data: ImageCreate, db: Session = Depends(get_db)):
    return image_service.add_image(db, product_id, **data.model_dump(exclude_none=True))


# Variations

@router.get("/{product_id}/variations", response_model=List[VariationOut])
def list_variations(product_id: int, db: Session = Depends(get_db)):
    product_service.get_product(db, product_id)
    return stock_service.list_variations(db, product_id)


@router.post("/{product_id}/variations", response_model=VariationOut, status_code=201)
def create_variation(product_id: int, data: VariationCreate, db: Session = Depends(get_db)):
    return stock_service.create_variation(db, product_id, **data.model_dump(exclude_none=True))


@router.get("/{product_id}/sizes", response_model=List[AvailableSizeOut])
def available_sizes(product_id: int, db: Session = Depends(get_db)):
    return stock_service.get_available_sizes(db, product_id)


# Attributes

@router.get("/{product_id}/attributes", response_model=List[ProductAttributeOut])
def list_product_attributes(product_id: int, db: Session = Depends(get_db)):
    product_service.get_product(db, product_id)
    return attribute_service.list_product_attributes(db, product_id)


@router.get("/{product_id}/attributes/formatted", response_model=List[FormattedAttributeOut])
def formatted_attributes(product_id: int, db: Session = Depends(get_db)):
    product_service.get_product(db, product_id)
    return attribute_service.get_formatted_product_attributes(db, product_id)


@router.put("/{product_id}/attributes/{attribute_type_id}", response_model=ProductAttributeOut)
def set_product_attribute(
    product_id: int,
    attribute_type_id: int,
    data: ProductAttributeSet,
    db: Session = Depends(get_db),
):
    fields = data.model_dump(exclude_none=True, exclude={"value", "validate_value"})
    return attribute_service.set_product_attribute(
        db, product_id, attribute_type_id, data.value, validate=data.validate_value, **fields
    )


@router.delete("/{product_id}/attributes/{attribute_type_id}", status_code=204)
def delete_product_attribute(product_id: int, attribute_type_id: int, db: Session = Depends(get_db)):
    attribute_service.delete_product_attribute(db, product_id, attribute_type_id)
    return None
