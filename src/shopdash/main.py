import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from tortoise import Tortoise
from tortoise.contrib.fastapi import tortoise_exception_handlers

from .core.config import DATABASE_URL
from .core.logging_config import configure_logging
from .features.inventory.router import router as inventory_router
from .features.orders.router import router as orders_router
from .features.auth.router import router as auth_router
from .features.reports.router import router as reports_router

configure_logging()
logger = logging.getLogger("shopdash.main")  # This logger will inherit from 'shopdash'

MODEL_MODULES = [
    "shopdash.features.auth.models",
    "shopdash.features.inventory.models",
    "shopdash.features.orders.models",
    "aerich.models",  # For Aerich migrations
]

TORTOISE_ORM_CONFIG = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {
            "models": MODEL_MODULES,
            "default_connection": "default",
        }
    },
    # Timestamps are stored in UTC; display time is applied by core.timezone
    "use_tz": True,
    "timezone": "UTC",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events, such as connecting to the database.
    """
    logger.info("Starting application...")
    await Tortoise.init(config=TORTOISE_ORM_CONFIG)
    logger.info("Tortoise-ORM has been initialized.")

    yield

    await Tortoise.close_connections()
    logger.info("Tortoise-ORM connections have been closed.")


app = FastAPI(
    title="Shopdash Admin API",
    description="Admin backend for the shop: sales reports, product analytics, orders and inventory.",
    version="0.1.0",
    exception_handlers=tortoise_exception_handlers(),
    lifespan=lifespan,
)


@app.get("/")
async def read_root(request: Request):
    client_host = request.client.host if request.client else "unknown client"
    logger.info(f"Root endpoint '/' accessed by {client_host}")
    return {"message": "Welcome to the Shopdash Admin API!"}


app.include_router(reports_router, prefix="/api/v1")
app.include_router(orders_router, prefix="/api/v1")
app.include_router(inventory_router, prefix="/api/v1")
app.include_router(auth_router, prefix="/api/v1")
