import logging
import os
import random
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Load env before settings are read
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from dailyfive.api import badges, education, health, market, notes, profile, quotes, streaks, tasks
from dailyfive.core.config import settings, validate_config
from dailyfive.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from dailyfive.core.logging import configure_logging
from dailyfive.core.middleware.request_id import RequestIdMiddleware
from dailyfive.features.badges.service import seed_badges
from dailyfive.features.market.service import seed_shop_items
from dailyfive.features.quotes.service import seed_quotes
from dailyfive.features.store import Store, build_store
from dailyfive.features.tasks.catalog import seed_catalog

logger = logging.getLogger("dailyfive")


def seed_defaults(store: Store) -> None:
    """Idempotently load the starter catalog, badges, shop items and quotes."""
    added = {
        "task_catalog": seed_catalog(store),
        "badges": seed_badges(store),
        "shop_items": seed_shop_items(store),
        "quotes": seed_quotes(store),
    }
    if any(added.values()):
        logger.info("seed.defaults", extra=added)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting dailyfive backend...")
    try:
        yield
    finally:
        logger.info("Stopping dailyfive backend...")


def create_app(
    store: Optional[Store] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[bool] = None,
) -> FastAPI:
    """Build the API around ``store`` (defaults to the configured backend)."""
    configure_logging(settings.ENV)
    validate_config(strict=settings.CONFIG_STRICT)

    app = FastAPI(title="dailyfive", lifespan=lifespan)
    app.state.store = store or build_store(settings)
    app.state.rng = rng
    if settings.SEED_DEFAULTS if seed is None else seed:
        seed_defaults(app.state.store)

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(streaks.router, tags=["streaks"])
    app.include_router(profile.router, tags=["profile"])
    app.include_router(badges.router, tags=["badges"])
    app.include_router(market.router, tags=["market"])
    app.include_router(notes.router, tags=["notes"])
    app.include_router(quotes.router, tags=["quotes"])
    app.include_router(education.router, tags=["education"])
    app.include_router(health.router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("dailyfive.main:app", host="0.0.0.0", port=8000, reload=False, log_level="info")


if __name__ == "__main__":
    run()
