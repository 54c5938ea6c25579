import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from quickbite.core.db import init_db, close_db
from quickbite.api.v1.auth import router as auth_router
from quickbite.api.v1.menu import router as menu_router
from quickbite.api.v1.orders import router as orders_router
from quickbite.api.v1.restaurants import router as restaurants_router
from quickbite.core.config import LOG_LEVEL, PROJECT_NAME, VERSION
from quickbite.core.exception_handlers import setup_exception_handlers
from quickbite.core.logging_config import configure_logging

configure_logging(LOG_LEVEL)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Opens the Tortoise connection pool for the lifetime of the process."""
    log.info("Starting %s v%s...", PROJECT_NAME, VERSION)
    await init_db()
    try:
        yield
    finally:
        await close_db()
        log.info("%s stopped.", PROJECT_NAME)


app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    description="Restaurants, menus and the order lifecycle for a food-delivery marketplace.",
    lifespan=lifespan,
)

# Public catalog and auth first, then owner/customer order flows
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(restaurants_router, prefix="/api/v1/restaurants", tags=["Restaurants"])
app.include_router(menu_router, prefix="/api/v1/menu", tags=["Menu"])
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Orders"])

setup_exception_handlers(app)


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check():
    """Liveness probe; does not touch the database."""
    return {"status": "ok", "app_name": PROJECT_NAME}
