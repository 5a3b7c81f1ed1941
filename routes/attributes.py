from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from schemas.attribute import (
    AttributeCategoryCount,
    AttributeCategoryCreate,
    AttributeCategoryOut,
    AttributeTypeCreate,
    AttributeTypeOut,
    AttributeTypeUpdate,
    AttributeValueCheck,
    AttributeValueResult,
)
from services import attributes as attribute_service

router = APIRouter(prefix="/attributes", tags=["attributes"])


@router.get("/categories", response_model=List[AttributeCategoryOut])
def list_attribute_categories(db: Session = Depends(get_db)):
    return attribute_service.list_attribute_categories(db)


@router.post("/categories", response_model=AttributeCategoryOut, status_code=201)
def create_attribute_category(data: AttributeCategoryCreate, db: Session = Depends(get_db)):
    return attribute_service.create_attribute_category(db, **data.model_dump(exclude_none=True))


@router.get("/categories/counts", response_model=List[AttributeCategoryCount])
def attribute_categories_with_count(db: Session = Depends(get_db)):
    return attribute_service.get_attribute_categories_with_count(db)


@router.get("/categories/{category_id}/types", response_model=List[AttributeTypeOut])
def attribute_types_by_category(category_id: int, db: Session = Depends(get_db)):
    return attribute_service.get_attribute_types_by_category(db, category_id)


@router.post("/types", response_model=AttributeTypeOut, status_code=201)
def create_attribute_type(data: AttributeTypeCreate, db: Session = Depends(get_db)):
    return attribute_service.create_attribute_type(db, **data.model_dump(exclude_none=True))


@router.patch("/types/{attribute_type_id}", response_model=AttributeTypeOut)
def update_attribute_type(attribute_type_id: int, data: AttributeTypeUpdate, db: Session = Depends(get_db)):
    return attribute_service.update_attribute_type(db, attribute_type_id, **data.model_dump(exclude_unset=True))


@router.post("/types/{attribute_type_id}/validate", response_model=AttributeValueResult)
def validate_attribute_value(attribute_type_id: int, data: AttributeValueCheck, db: Session = Depends(get_db)):
    return {
        "attribute_type_id": attribute_type_id,
        "value": data.value,
        "is_valid": attribute_service.validate_attribute_value(db, attribute_type_id, data.value),
    }
