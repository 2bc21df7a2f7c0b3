from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from . import __version__
from .config import settings
from .database import engine, Base
from .routers import calculator, customers, dashboard, documents, export, pdf

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("levelquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    The initial revision skips tables create_all() already made, so a fresh
    database and one that predates Alembic both upgrade cleanly to head.
    """
    try:
        from alembic.config import Config
        from alembic import command

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.attributes["configure_logger"] = False

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning(f"Alembic migration warning: {e}")


app = FastAPI(
    title="LevelQuote",
    description="Foam leveling pricing, invoices and estimates for concrete and masonry work",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(calculator.router, prefix="/api")
app.include_router(customers.router, prefix="/api")
app.include_router(documents.invoices_router, prefix="/api")
app.include_router(documents.estimates_router, prefix="/api")
app.include_router(pdf.router, prefix="/api")
app.include_router(export.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "levelquote"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()
