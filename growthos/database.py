"""Growth OS — Database Engine & Session Factory.

One engine per process, built from settings. SQLite is used when no
DATABASE_URL is set; PostgreSQL gets a small pre-pinged pool. The helpers
take an optional ``bind`` so tests can point them at their own engine.
"""

from typing import Optional

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, Session, create_engine

from growthos.config import settings
from growthos.core.logging import get_logger

# Register table models on SQLModel.metadata
from growthos.models.client_models import Client  # noqa: F401
from growthos.models.funnel_models import FunnelSnapshot  # noqa: F401
from growthos.models.metrics_models import DashboardMetricsSnapshot  # noqa: F401

logger = get_logger("database")

POSTGRES_POOL = {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10, "pool_recycle": 300}


def backend_name(url: str) -> str:
    return make_url(url).get_backend_name()


def mask_url(url: str) -> str:
    """URL with the password replaced by ``***``."""
    return make_url(url).render_as_string(hide_password=True)


def build_engine(url: str) -> Engine:
    if backend_name(url) == "sqlite":
        # Sessions are used from the scheduler thread as well as request handlers
        return create_engine(url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(url, echo=False, **POSTGRES_POOL)


db_url = settings.effective_database_url
engine = build_engine(db_url)
logger.info(f"📦 Database backend: {backend_name(db_url)} ({mask_url(db_url)})")


def test_connection(bind: Optional[Engine] = None) -> bool:
    """Run ``SELECT 1``; False (logged) when the database is unreachable."""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"❌ Database connection test: FAILED — {e}")
        return False
    logger.info("✅ Database connection test: SUCCESS")
    return True


def init_db(bind: Optional[Engine] = None) -> None:
    SQLModel.metadata.create_all(bind or engine)
    logger.info("✅ Database tables ready")


def verify_schema(bind: Optional[Engine] = None) -> list[str]:
    """Return declared tables missing from the live database.

    Run once at startup; request handlers assume the schema is present.
    """
    existing = set(inspect(bind or engine).get_table_names())
    missing = sorted(set(SQLModel.metadata.tables) - existing)
    if missing:
        logger.error(f"❌ Missing tables: {', '.join(missing)}")
    else:
        logger.info("✅ Schema verified")
    return missing


def get_session():
    """Dependency — yields a DB session."""
    with Session(engine) as session:
        yield session
