from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from schemas.category import CategoryCreate, CategoryUpdate, CategoryOut, CategoryPath
from services import categories as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryOut])
def list_categories(parent_id: Optional[int] = None, roots_only: bool = False, db: Session = Depends(get_db)):
    return category_service.list_categories(db, parent_id=parent_id, roots_only=roots_only)


@router.post("/", response_model=CategoryOut, status_code=201)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    return category_service.create_category(db, **data.model_dump(exclude_none=True))


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return category_service.get_category(db, category_id)


@router.get("/{category_id}/path", response_model=CategoryPath)
def category_path(category_id: int, db: Session = Depends(get_db)):
    return {"category_id": category_id, "path": category_service.get_category_path(db, category_id)}


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, data: CategoryUpdate, db: Session = Depends(get_db)):
    return category_service.update_category(db, category_id, **data.model_dump(exclude_unset=True))


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category_service.delete_category(db, category_id)
    return None
