from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from healthcare_api.core import config


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared across FastAPI's threadpool workers.
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    echo=config.SQL_ECHO,
    connect_args=_connect_args(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def init_db() -> None:
    # Import the models so every table is registered on Base.metadata.
    from healthcare_api.models import appointment, availability, feedback, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
