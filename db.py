import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from dotenv import load_dotenv
from contextlib import contextmanager

load_dotenv()

logger = logging.getLogger("profile_store")

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL env var not set")

class Base(DeclarativeBase):
    pass

# sqlite is only used by the test suite; sessions cross the FastAPI threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, future=True, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

def init_db():
    # models must be imported so their tables are registered on Base.metadata
    import models.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Directory tables ready on %s", engine.url.get_backend_name())

@contextmanager
def get_db():
    """One session per request: committed on success, rolled back on any error."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.debug("Rolled back request session after %s", type(e).__name__)
        raise
    finally:
        db.close()

def get_session():
    """FastAPI dependency: yields the request's session from get_db()."""
    with get_db() as db:
        yield db
