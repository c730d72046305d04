# app/main.py
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from app.core.config import get_settings
from app.core.email_client import EmailClient
from app.core.errors import register_exception_handlers
from app.database import create_db_engine, create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from app.models import order as _order_models  # noqa: F401
from app.models import referral as _referral_models  # noqa: F401

# Routers
from app.routers.orders import router as orders_router
from app.routers.referrals import router as referrals_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Build the DB engine, verify connectivity and create tables.
      - Build the email client and check the SMTP login.

    Shutdown:
      - Dispose the engine's connection pool.
    """
    logger.info("🔄 Startup: Connecting to database...")
    engine = create_db_engine(settings.DATABASE_URL)
    try:
        create_db_and_tables(engine)
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise
    app.state.engine = engine

    email_client = EmailClient.from_settings(settings)
    try:
        email_client.verify()
        logger.info("✅ Startup: SMTP configuration OK, ready to send emails.")
    except Exception as e:
        # Orders still work without email; notifications will be logged as failed.
        logger.error(f"❌ Startup: SMTP configuration error: {e}")
    app.state.email_client = email_client

    yield

    engine.dispose()
    logger.info("👋 Shutdown: DB connections closed.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(orders_router, prefix=settings.API_PREFIX)
app.include_router(referrals_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "chicken-shop-backend"}


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
