"""Database connection and session management.

The engine is created on first use and points at the on-disk SQLite file
unless :func:`configure_engine` chose another URL first.
"""

from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomodian"
DB_PATH = APP_SUPPORT_DIR / "pomodian.db"

_engine = None
_SessionFactory = None


def configure_engine(url: str | None = None) -> None:
    """Bind the session log to *url*, or to ``DB_PATH`` when omitted.

    Tests pass ``sqlite:///:memory:`` for a throwaway database.  Any
    previously configured engine is disposed.
    """
    global _engine, _SessionFactory
    if url is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        url = f"sqlite:///{DB_PATH}"
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, connect_args={"check_same_thread": False})
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)


def init_db() -> None:
    """Create the ``sessions`` table if it does not exist yet."""
    if _engine is None:
        configure_engine()
    Base.metadata.create_all(_engine)


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    if _SessionFactory is None:
        configure_engine()
    session: OrmSession = _SessionFactory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
