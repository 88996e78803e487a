"""SQLite engines backing the local key-value collections.

Engines are cached per resolved database path, so changing
``FAMLY_DATABASE_PATH`` between calls picks up a separate file.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from famly.config import get_settings
from famly.db.models import Base

logger = logging.getLogger(__name__)

_engines: Dict[Path, Engine] = {}
_session_factories: Dict[Path, sessionmaker[Session]] = {}
_engines_lock = threading.Lock()


def _resolve(database_path: Optional[Path]) -> Path:
    return Path(database_path or get_settings().database_path).expanduser().resolve()


def get_engine(database_path: Optional[Path] = None) -> Engine:
    """Return the engine for ``database_path`` (default: configured path), creating tables once."""

    path = _resolve(database_path)
    with _engines_lock:
        engine = _engines.get(path)
        if engine is None:
            path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(f"sqlite:///{path}", future=True)
            Base.metadata.create_all(engine)
            _engines[path] = engine
            _session_factories[path] = sessionmaker(bind=engine, autoflush=False, future=True)
            logger.debug("Local database ready at %s", path)
    return engine


@contextmanager
def session_scope(database_path: Optional[Path] = None) -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on error."""

    path = _resolve(database_path)
    get_engine(path)
    session = _session_factories[path]()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Close every cached engine (used by tests between database files)."""

    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _session_factories.clear()


__all__ = ["get_engine", "session_scope", "dispose_engines"]
