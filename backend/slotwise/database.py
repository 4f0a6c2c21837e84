from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool

Base = declarative_base()


def make_engine(db_url: str, app_env: str = "dev"):
    # in-memory SQLite: a single shared connection, otherwise every session sees an empty DB
    if db_url.startswith("sqlite") and ":memory:" in db_url:
        return create_engine(
            db_url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # dev: no pool -> connection closed right after every request
    if app_env.lower() != "prod":
        return create_engine(
            db_url,
            future=True,
            pool_pre_ping=True,
            poolclass=NullPool,
        )

    # prod: small, conservative pool
    return create_engine(
        db_url,
        future=True,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
        pool_recycle=1800,
    )


def make_sessionmaker(engine):
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


def get_db(request: Request):
    db = request.app.state.sessionmaker()
    try:
        yield db
    finally:
        db.close()  # releases the connection back to the pool
