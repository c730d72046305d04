# app/database.py
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session


def _with_sslmode(db_url: str) -> str:
    """Append sslmode=require if it is not already present."""
    if "sslmode=" in db_url:
        return db_url
    if "?" in db_url:
        return db_url + "&sslmode=require"
    return db_url + "?sslmode=require"


def create_db_engine(db_url: str, echo: bool = False) -> Engine:
    """
    Build the SQLAlchemy engine for the given connection string.

    Postgres:
      - sslmode=require   : enforce SSL when running in the cloud
      - pool_size=1       : keep only 1 connection to the hosted pooler
      - max_overflow=0    : do not open extra connections beyond the pool
      - pool_pre_ping=True: validate connections before using them

    Anything else (SQLite for local runs and tests) uses driver defaults.
    """
    if db_url.startswith("postgres"):
        return create_engine(
            _with_sslmode(db_url),
            echo=echo,
            pool_pre_ping=True,
            pool_size=1,
            max_overflow=0,
        )
    return create_engine(db_url, echo=echo)


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """
    FastAPI dependency that yields a SQLModel Session bound to the
    engine created in the app lifespan.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
