from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session

from enquiry_app import config

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}
        _engine = create_engine(config.DATABASE_URL, echo=config.DB_ECHO, connect_args=connect_args)
    return _engine


def set_engine(engine: Optional[Engine]) -> None:
    """Swap the process-wide engine (tests use an in-memory SQLite engine)."""
    global _engine
    _engine = engine


def get_session() -> Session:
    return Session(get_engine())
