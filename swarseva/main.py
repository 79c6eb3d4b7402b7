import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from swarseva.config import settings
from swarseva.database import connect_to_mongo, close_mongo_connection
from swarseva.errors import ServerError, SwarSevaError, pydantic_errors_to_fields
from swarseva.routes import services_router
from swarseva.services.mongo_service import mongo_service

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_mongo()
    logger.info("Connected to MongoDB")
    await mongo_service.ensure_indexes()
    yield
    # Shutdown
    await close_mongo_connection()
    logger.info("Disconnected from MongoDB")


async def swarseva_error_handler(request: Request, exc: SwarSevaError):
    body = exc.to_dict()
    if isinstance(exc, ServerError) and settings.debug and exc.detail:
        body["error"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=body)


async def validation_error_handler(request: Request, exc):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Validation error",
            "errors": pydantic_errors_to_fields(exc.errors()),
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    body = {"success": False, "message": "Internal server error"}
    if settings.debug:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Multilingual directory of government services with eligibility, fee and document checks",
        version=settings.app_version,
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SwarSevaError, swarseva_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/")
    async def root():
        return {"message": f"{settings.app_name} is running", "version": settings.app_version}

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        database = "connected" if await mongo_service.health_check() else "unavailable"
        return {"status": "healthy", "service": "swarseva-backend", "database": database}

    app.include_router(services_router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("swarseva.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
