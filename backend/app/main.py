"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, settings as default_settings
from app.database import build_engine
from app.exceptions import EmptyUploadError, FileServiceError
from app.logging_config import configure_logging
from app.routes.files import get_file_service, router as files_router
from app.schemas.common import HealthResponse
from app.services.blob_store import BlobStore
from app.services.catalog import MetadataCatalog
from app.services.file_service import FileService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the storage stack once and create tables on startup."""
        configure_logging(settings.LOG_LEVEL)
        engine = build_engine(settings.DATABASE_URL)
        catalog = MetadataCatalog(engine)
        await catalog.create_schema()
        blob_store = BlobStore(settings.FILE_STORAGE_PATH)
        app.state.file_service = FileService(blob_store, catalog)
        logger.info("Storing blobs in %s", blob_store.base_path)

        yield

        await engine.dispose()

    app = FastAPI(
        title="File Storage API",
        version="1.0.0",
        description="Upload, list, download and delete files.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(FileServiceError)
    async def file_service_error_handler(request: Request, exc: FileServiceError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        if any("file" in err.get("loc", ()) for err in exc.errors()):
            message = EmptyUploadError.default_message
        else:
            message = "Invalid request."
        return JSONResponse(status_code=400, content={"error": message})

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Verify API and database connectivity."""
        service = get_file_service(request)
        try:
            await service.catalog.ping()
            return {"status": "ok", "database": "connected"}
        except Exception as e:
            return {"status": "error", "database": str(e)}

    app.include_router(files_router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=default_settings.API_HOST, port=default_settings.API_PORT)
