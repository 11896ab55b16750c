import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .routes.documents import router as documents_router
from .routes.uploads import router as uploads_router
from .services.catalog_service import DocumentCatalog, build_catalog
from .utils.logging import logger


def create_app(settings: Optional[Settings] = None, catalog: Optional[DocumentCatalog] = None) -> FastAPI:
    settings = settings or default_settings
    logger.configure(settings.LOG_LEVEL, settings.log_dir_path if settings.LOG_TO_FILE else None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.log_step("starting_document_catalog", {
            "host": settings.APP_HOST,
            "port": settings.APP_PORT,
            "debug": settings.DEBUG,
            "python_version": sys.version,
            "documents": len(app.state.catalog.store)
        })

        yield

        await app.state.catalog.shutdown()
        logger.log_step("document_catalog_shutdown")

    app = FastAPI(
        title=settings.SERVICE_NAME,
        description="Document catalog service for uploading, searching and organizing documents.",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan
    )
    app.state.catalog = catalog if catalog is not None else build_catalog(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.log_step("request_completed", {
            "method": request.method,
            "url": str(request.url),
            "status_code": response.status_code,
            "process_time": process_time
        })

        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.log_error("unhandled_exception", {
            "method": request.method,
            "url": str(request.url),
            "error": str(exc)
        })

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    app.include_router(uploads_router)
    app.include_router(documents_router)

    @app.get("/")
    async def root():
        return {
            "message": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "endpoints": {
                "health": "/api/v1/health",
                "uploads": "/api/v1/uploads/",
                "documents": "/api/v1/documents/",
                "notifications": "/api/v1/notifications",
                "docs": "/docs"
            }
        }

    return app


app = create_app()
