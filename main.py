import os
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.config import settings
from core.db import Base, engine
from core.exceptions import (
    CatalogError,
    ConstraintViolation,
    CycleDetected,
    RecordNotFound,
    ReferentialViolation,
    UniquenessViolation,
    ValidationFailure,
)
from core.logging_config import get_logger, setup_logging
import models  # noqa: F401  registers mappers and flush rules
from routes.attributes import router as attributes_router
from routes.brands import router as brands_router
from routes.categories import router as categories_router
from routes.images import router as images_router
from routes.products import router as products_router
from routes.sizes import router as sizes_router
from routes.variations import router as variations_router

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR or None)
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Ensure tables exist (for dev/test; in prod use Alembic)
Base.metadata.create_all(bind=engine)

STATUS_CODES = {
    RecordNotFound: 404,
    UniquenessViolation: 409,
    ReferentialViolation: 409,
    CycleDetected: 409,
    ValidationFailure: 422,
    ConstraintViolation: 422,
}


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    status_code = next(
        (code for error_type, code in STATUS_CODES.items() if isinstance(exc, error_type)),
        400,
    )
    logger.info("%s %s -> %s %s", request.method, request.url.path, status_code, exc.message)
    content = {"detail": exc.message, "error": type(exc).__name__}
    field = getattr(exc, "field", None)
    if field:
        content["field"] = field
    return JSONResponse(status_code=status_code, content=content)


app.include_router(brands_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(images_router)
app.include_router(variations_router)
app.include_router(sizes_router)
app.include_router(attributes_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.DEBUG,
    )
