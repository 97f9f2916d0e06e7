# mediaplanner/db/core.py

import os
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

from sqlmodel import SQLModel, create_engine, Session
from dotenv import load_dotenv

from mediaplanner.core.logging import get_logger

load_dotenv()

log = get_logger("db")

# ---------------------------------------------------------
# Resolve DATABASE_URL
# ---------------------------------------------------------
raw = os.getenv("DATABASE_URL") or os.getenv("DB_URL")
if not raw:
    raise RuntimeError("DATABASE_URL is not set")

# 1) Normalize Postgres URI → psycopg2 driver
url = raw.replace("postgres://", "postgresql://", 1)
if url.startswith("postgresql://"):
    url = url.replace("postgresql://", "postgresql+psycopg2://", 1)

is_sqlite = url.startswith("sqlite")

# 2) Add sslmode=require for cloud DBs (not localhost)
if not is_sqlite:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    query = dict(parse_qsl(parsed.query, keep_blank_values=True))
    if host not in ("localhost", "127.0.0.1", "::1") and "sslmode" not in query:
        query["sslmode"] = "require"
        url = urlunparse(parsed._replace(query=urlencode(query)))

log.info("database_configured", extra={"driver": urlparse(url).scheme})

# ---------------------------------------------------------
# Engine
# ---------------------------------------------------------
if is_sqlite:
    # request handlers run in a threadpool
    engine = create_engine(url, connect_args={"check_same_thread": False})
else:
    engine = create_engine(
        url,
        pool_pre_ping=True,
        pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
    )

# ---------------------------------------------------------
# DB Init + Session
# ---------------------------------------------------------

def init_db() -> None:
    """
    Ensure tables exist. Called from the app lifespan in mediaplanner/main.py.
    """
    from mediaplanner.db import models  # noqa: F401  registers SQLModel metadata
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Dependency for FastAPI endpoints.
    """
    with Session(engine) as session:
        yield session
