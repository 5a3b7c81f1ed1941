from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from schemas.size import (
    SizeCategoryCreate, SizeCategoryOut, SizeOptionCreate, SizeOptionOut, SizeOptionUpdate,
)
from services import sizes as size_service

router = APIRouter(prefix="/sizes", tags=["sizes"])


@router.get("/categories", response_model=List[SizeCategoryOut])
def list_size_categories(db: Session = Depends(get_db)):
    return size_service.list_size_categories(db)


@router.post("/categories", response_model=SizeCategoryOut, status_code=201)
def create_size_category(data: SizeCategoryCreate, db: Session = Depends(get_db)):
    return size_service.create_size_category(db, **data.model_dump(exclude_none=True))


@router.get("/categories/{size_category_id}/options", response_model=List[SizeOptionOut])
def list_size_options(size_category_id: int, active_only: bool = False, db: Session = Depends(get_db)):
    return size_service.list_size_options(db, size_category_id, active_only=active_only)


@router.post("/categories/{size_category_id}/options", response_model=SizeOptionOut, status_code=201)
def create_size_option(size_category_id: int, data: SizeOptionCreate, db: Session = Depends(get_db)):
    return size_service.create_size_option(db, size_category_id, **data.model_dump(exclude_none=True))


@router.patch("/options/{size_option_id}", response_model=SizeOptionOut)
def update_size_option(size_option_id: int, data: SizeOptionUpdate, db: Session = Depends(get_db)):
    return size_service.update_size_option(db, size_option_id, **data.model_dump(exclude_unset=True))


@router.delete("/options/{size_option_id}", status_code=204)
def delete_size_option(size_option_id: int, db: Session = Depends(get_db)):
    size_service.delete_size_option(db, size_option_id)
    return None
