from sqlalchemy import create_engine, event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ...config.settings import get_settings

settings = get_settings()

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the process-wide engine for the configured database."""
    if database_url.startswith("sqlite"):
        engine_kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            # One shared connection, otherwise every pool checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **engine_kwargs)

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(settings.get_database_url(), echo=settings.database_echo)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def insert_or_ignore(db: Session, model, values: dict):
    """INSERT that silently skips rows whose primary key already exists."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model).values(**values).on_conflict_do_nothing()
    if dialect == "sqlite":
        return sqlite.insert(model).values(**values).on_conflict_do_nothing()
    raise NotImplementedError(f"insert-or-ignore is not supported for dialect '{dialect}'")


def get_db():
    """FastAPI dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
