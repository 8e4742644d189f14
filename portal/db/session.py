# portal/db/session.py
import sys, asyncio
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from portal.core.config import settings


def _database_url() -> str:
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    data_dir = Path(__file__).resolve().parents[2] / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    db_file = data_dir / "portal.db"
    # usar caminho POSIX para o SQLAlchemy
    return f"sqlite+aiosqlite:///{db_file.as_posix()}"


engine = create_async_engine(_database_url(), echo=False, future=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
