from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from storefront.core.config import settings

class Base(DeclarativeBase): pass

engine: Engine | None = None
SessionLocal = sessionmaker(autoflush=False, autocommit=False)

def init_engine(url: str | None = None, **kwargs) -> Engine:
    """Create the process-wide engine and bind the session factory to it."""
    global engine
    url = url or settings.DATABASE_URL
    if url.startswith('sqlite'):
        kwargs.setdefault('connect_args', {'check_same_thread': False})
    else:
        kwargs.setdefault('pool_pre_ping', True)
    engine = create_engine(url, **kwargs)
    SessionLocal.configure(bind=engine)
    return engine

def dispose_engine() -> None:
    global engine
    if engine is not None:
        engine.dispose()
        engine = None
