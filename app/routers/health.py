"""Health check router."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_db

router = APIRouter()

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "alembic"


@lru_cache(maxsize=1)
def migration_head() -> Optional[str]:
    """Newest revision shipped with the code, or None without a migrations folder."""
    if not MIGRATIONS_DIR.is_dir():
        return None
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    return ScriptDirectory.from_config(config).get_current_head()


async def applied_revision(db: AsyncSession) -> Optional[str]:
    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError:
        # tables created straight from the models have no version table
        await db.rollback()
        return None
    return result.scalar_one_or_none()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Database reachability and whether the schema is on the latest migration."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        await db.rollback()
        db_ok = False
    else:
        db_ok = True

    current = await applied_revision(db) if db_ok else None
    head = migration_head()

    return {
        "app": settings.APP_NAME,
        "api_ok": True,
        "db_ok": db_ok,
        "alembic_current": current,
        "alembic_head": head,
        "alembic_head_ok": bool(current and current == head),
    }
