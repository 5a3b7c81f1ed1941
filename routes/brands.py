from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from schemas.brand import BrandCreate, BrandUpdate, BrandOut, BrandStatistics
from services import brands as brand_service

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("/", response_model=List[BrandOut])
def list_brands(active_only: bool = False, db: Session = Depends(get_db)):
    return brand_service.list_brands(db, active_only=active_only)


@router.post("/", response_model=BrandOut, status_code=201)
def create_brand(data: BrandCreate, db: Session = Depends(get_db)):
    return brand_service.create_brand(db, **data.model_dump(exclude_none=True))


@router.get("/{brand_id}", response_model=BrandOut)
def get_brand(brand_id: int, db: Session = Depends(get_db)):
    return brand_service.get_brand(db, brand_id)


@router.get("/{brand_id}/statistics", response_model=BrandStatistics)
def brand_statistics(brand_id: int, db: Session = Depends(get_db)):
    return brand_service.get_brand_statistics(db, brand_id)


@router.patch("/{brand_id}", response_model=BrandOut)
def update_brand(brand_id: int, data: BrandUpdate, db: Session = Depends(get_db)):
    return brand_service.update_brand(db, brand_id, **data.model_dump(exclude_unset=True))


@router.delete("/{brand_id}", status_code=204)
def delete_brand(brand_id: int, db: Session = Depends(get_db)):
    brand_service.delete_brand(db, brand_id)
    return None
