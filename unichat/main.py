import logging
from pathlib import Path
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from unichat.config import get_settings
from unichat.database import init_db, set_db_path
from unichat.errors import ChatServiceError, InvalidArgument
from unichat.routers import health, chat, usage, models
from unichat.services.cost_tracker import CostTracker
from unichat.services.pricing import build_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    # Fail fast if a catalog model cannot be routed or priced
    catalog = build_catalog(settings.models_config, CostTracker(settings).price_table)
    logger.info("Loaded %d models into the catalog", len(catalog))

    # Ensure data directories exist
    db_path = Path(settings.database_url)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    # Initialize database
    set_db_path(settings.database_url)
    await init_db()
    logger.info("UniChat backend started")

    yield

    logger.info("UniChat backend shutting down")


async def chat_service_error_handler(request: Request, exc: ChatServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = InvalidArgument(f"Invalid request parameters: {exc.errors()}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ChatServiceError, chat_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)


def create_app() -> FastAPI:
    app = FastAPI(
        title="UniChat API",
        description="Unified multi-provider chat with hourly quotas & usage accounting",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Routers
    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(usage.router)
    app.include_router(models.router)

    register_error_handlers(app)

    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    extra_origins = get_settings().allowed_origins
    if extra_origins:
        origins.extend(
            o.strip()
            for o in extra_origins.split(",")
            if o.strip()
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


@app.get("/")
async def read_root():
    return {
        "status": "ok",
        "message": "UniChat backend is running",
        "docs": "/docs",
    }
