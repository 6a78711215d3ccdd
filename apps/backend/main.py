import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tracker.config import Settings, settings as default_settings
from tracker.database import Database
from tracker.health import check_database
from tracker.logger import configure_logging
from tracker.routers import jobs

logger = logging.getLogger("tracker.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: open the store handle unless one was injected
    settings: Settings = app.state.settings
    if app.state.database is None:
        app.state.database = Database.from_settings(settings)
    logger.info(f"Starting {settings.app_name}")
    await app.state.database.init()
    logger.info("Database tables created successfully")
    yield
    # Shutdown: Close connections
    logger.info(f"Shutting down {settings.app_name}")
    await app.state.database.close()
    logger.info("Database connections closed")


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with one entry per field."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        errors.append({
            "field": str(loc[-1]) if loc else None,
            "msg": err["msg"],
            "location": loc[0] if loc else None,
        })
    logger.info(f"Rejected {request.method} {request.url.path}: {len(errors)} validation error(s)")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors},
    )


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings. Defaults to the environment-loaded settings
        database: Store handle to use instead of one built from settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Maintenance job tracking",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(jobs.router)

    @app.get("/")
    async def root():
        return {"message": f"{settings.app_name} - Ready"}

    @app.get("/health")
    async def health_check(request: Request):
        """Report store connectivity."""
        db_health = await check_database(request.app.state.database)
        return {
            "status": "healthy" if db_health.status == "connected" else "degraded",
            "dependencies": {
                "database": db_health.status,
            },
            "latency_ms": db_health.latency_ms,
        }

    return app


app = create_app()
