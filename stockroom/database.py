# stockroom/database.py
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session

from stockroom.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Database connection
#
# Postgres (production):
#   - sslmode=require   : enforce SSL when running in the cloud
#   - pool_size=5       : requests run concurrently in the threadpool,
#                         each order transaction holds one connection
#   - pool_pre_ping=True: validate connections before using them
#
# SQLite (local dev / tests):
#   - check_same_thread=False: sessions are used from worker threads
#   - timeout=30            : writers wait on the database lock instead of
#                             failing immediately
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

if db_url.startswith("sqlite"):
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    # SQLite ignores foreign keys unless asked, per connection.
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

else:
    # Append sslmode=require if it is not already present
    if "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    engine = create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
    )


def create_db_and_tables() -> None:
    """
    Create all tables (and partial unique indexes) defined in SQLModel
    metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    One session per request. Services decide when to commit; a session
    closed without commit discards pending changes.
    """
    with Session(engine) as session:
        yield session
