from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from schemas.variation import (
    LowStockOut, StockAdjust, StockLogOut, StockSet, VariationOut, VariationUpdate,
)
from services import stock as stock_service

router = APIRouter(prefix="/variations", tags=["variations"])


@router.get("/low-stock", response_model=List[LowStockOut])
def low_stock(db: Session = Depends(get_db)):
    return stock_service.get_low_stock_variations(db)


@router.get("/{variation_id}", response_model=VariationOut)
def get_variation(variation_id: int, db: Session = Depends(get_db)):
    return stock_service.get_variation(db, variation_id)


@router.patch("/{variation_id}", response_model=VariationOut)
def update_variation(variation_id: int, data: VariationUpdate, db: Session = Depends(get_db)):
    stock_service.get_variation(db, variation_id)
    return stock_service.update_variation(db, variation_id, **data.model_dump(exclude_unset=True))


@router.put("/{variation_id}/stock", response_model=VariationOut)
def set_stock(variation_id: int, data: StockSet, db: Session = Depends(get_db)):
    stock_service.get_variation(db, variation_id)
    return stock_service.set_stock_quantity(db, variation_id, **data.model_dump())


@router.post("/{variation_id}/stock/adjust", response_model=VariationOut)
def adjust_stock(variation_id: int, data: StockAdjust, db: Session = Depends(get_db)):
    stock_service.get_variation(db, variation_id)
    return stock_service.adjust_stock(db, variation_id, **data.model_dump())


@router.get("/{variation_id}/stock/history", response_model=List[StockLogOut])
def stock_history(variation_id: int, db: Session = Depends(get_db)):
    return stock_service.get_stock_history(db, variation_id)


@router.delete("/{variation_id}", status_code=204)
def delete_variation(variation_id: int, db: Session = Depends(get_db)):
    stock_service.delete_variation(db, variation_id)
    return None
