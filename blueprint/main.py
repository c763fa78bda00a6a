"""
FastAPI Application - Blueprint API
Following FastAPI best practices with proper separation of concerns
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from blueprint.api import categories, health, home, items
from blueprint.core.config import Config, config
from blueprint.core.errors import (
    ErrorResponse,
    ValidationProblem,
    error_response_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
    validation_problem_handler,
)
from blueprint.core.logger import logger
from blueprint.core.telemetry import init_telemetry, instrument_app, instrument_broker, instrument_engine
from blueprint.db.database import close_database_connection, connect_to_database, create_schema, db
from blueprint.db.seed import seed_categories
from blueprint.events.publisher import RabbitMQEventPublisher
from blueprint.middleware import RequestLoggingMiddleware, TraceContextMiddleware

# Initialize OpenTelemetry tracing BEFORE creating FastAPI app
init_telemetry()
instrument_broker()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Blueprint API...")

    engine = await connect_to_database()
    instrument_engine(engine)
    await create_schema()
    async with db.session_factory() as session:
        await seed_categories(session)

    # Connects lazily on first publish
    app.state.event_publisher = RabbitMQEventPublisher()

    logger.info(
        "Blueprint API started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
        }
    )

    yield

    logger.info("Shutting down Blueprint API...")
    await app.state.event_publisher.close()
    await close_database_connection()


def create_app(settings: Config = config) -> FastAPI:
    """Build the API; docs and CORS follow the given environment"""
    app = FastAPI(
        title="Blueprint API",
        description="Items and categories with item lifecycle events",
        version=settings.service_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        swagger_ui_init_oauth={
            "clientId": settings.swagger_ui_client_id,
            "usePkceWithAuthorizationCodeGrant": True,
            "scopes": settings.auth_api_scope,
        },
    )

    instrument_app(app)

    app.add_exception_handler(ValidationProblem, validation_problem_handler)
    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Last added runs first: CORS, then trace context, then request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TraceContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(home.router, tags=["home"])
    app.include_router(health.router, tags=["health"])
    app.include_router(items.router, prefix="/items", tags=["items"])
    app.include_router(categories.router, prefix="/categories", tags=["categories"])

    return app


app = create_app()


def run():
    """Console entry point"""
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
        }
    )

    uvicorn.run(
        "blueprint.main:app",
        host=config.host,
        port=config.port,
        reload=config.is_development,
    )


if __name__ == "__main__":
    run()
