from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.image_routes import router as image_router
from src.infrastructure.config import get_settings
from src.infrastructure.database.mongo_client import close_mongo_client
from src.infrastructure.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_mongo_client()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="ImageVariants Backend",
        version="0.1.0",
        description="""
        ## ImageVariants Backend API

        Stores uploaded images and serves them at any height up to the
        original, preserving the aspect ratio.

        ### Features
        - **Upload**: Stores the original and pre-generates the catalog variations
        - **Variations**: Missing heights are generated on first request
        - **Metadata**: Dimensions, paths, upload time, size and type per image
        - **Storage backends**: JSON snapshot file or MongoDB (`USE_MONGO=1`)

        ### Error Responses
        - **400 Bad Request**: Empty or invalid image, or height above the original
        - **404 Not Found**: Unknown image, or its file is missing on disk
        - **422 Unprocessable Entity**: Malformed request
        - **500 Internal Server Error**: Storage failure
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )
    add_default_middlewares(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the ImageVariants API",
    )
    def root():
        """Get API root information."""
        return RootResponse(status="ok", service="imagevariants-backend", version=app.version)

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
    )
    def health():
        """Check API health status."""
        return HealthResponse(status="healthy")

    app.include_router(image_router)
    return app


app = create_app()
