from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from schemas.product import ImageOut, ImageUpdate
from services import images as image_service

router = APIRouter(prefix="/images", tags=["images"])


@router.patch("/{image_id}", response_model=ImageOut)
def update_image(image_id: int, data: ImageUpdate, db: Session = Depends(get_db)):
    return image_service.update_image(db, image_id, **data.model_dump(exclude_unset=True))


@router.post("/{image_id}/primary", response_model=ImageOut)
def set_primary_image(image_id: int, db: Session = Depends(get_db)):
    return image_service.set_primary_image(db, image_id)


@router.delete("/{image_id}", status_code=204)
def delete_image(image_id: int, db: Session = Depends(get_db)):
    image_service.delete_image(db, image_id)
    return None
