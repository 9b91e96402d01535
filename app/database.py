# app/database.py
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Connection setup
#
# Postgres (production, via pooler):
#   - sslmode=require   : enforce SSL when running in the cloud
#   - pool_size=1       : keep only 1 connection to the pooler
#   - max_overflow=0    : do not open extra connections beyond the pool
#   - pool_pre_ping=True: validate connections before using them
#
# SQLite (local dev):
#   - check_same_thread=False: FastAPI runs sync endpoints in a threadpool
# ---------------------------------------------------------

db_url = settings.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 1,
        "max_overflow": 0,
    }


# Append sslmode=require for Postgres if it is not already present
if db_url.startswith("postgres") and "sslmode=" not in db_url:
    if "?" in db_url:
        db_url = db_url + "&sslmode=require"
    else:
        db_url = db_url + "?sslmode=require"

engine = create_engine(
    db_url,
    echo=False,        # set to True if you want to debug SQL queries
    **_engine_kwargs(db_url),
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
