# stockroom/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from stockroom.core.config import get_settings
from stockroom.core.notifications import get_notifier
from stockroom.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from stockroom.models import user as _user_models  # noqa: F401
from stockroom.models import category as _category_models  # noqa: F401
from stockroom.models import product as _product_models  # noqa: F401
from stockroom.models import stock as _stock_models  # noqa: F401
from stockroom.models import customer as _customer_models  # noqa: F401
from stockroom.models import order as _order_models  # noqa: F401


# Routers
from stockroom.routers.users import router as users_router
from stockroom.routers.categories import router as categories_router
from stockroom.routers.products import router as products_router
from stockroom.routers.stocks import router as stocks_router
from stockroom.routers.customers import router as customers_router
from stockroom.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - Let queued low-stock emails finish sending.
    """
    logger.info("Startup: connecting to the database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield
    logger.info("Shutdown: draining low stock notifications...")
    get_notifier().shutdown(wait=True)


app = FastAPI(
    title=settings.PROJECT_NAME or "Stockroom Inventory API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(categories_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(stocks_router, prefix=settings.API_V1_STR)
app.include_router(customers_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "stockroom-backend"}
