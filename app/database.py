"""
Engine, session factory and declarative base for leads and generated scripts.

SQLite is the local default; production points DATABASE_URL at Postgres.
Alembic owns the schema (see alembic/versions).
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from app.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


def enable_sqlite_foreign_keys(sqlite_engine):
    """Turn on FK enforcement so deleting a lead cascades to its scripts."""

    @event.listens_for(sqlite_engine, 'connect')
    def _on_connect(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    return sqlite_engine


# Hosted Postgres URLs still use postgres://, SQLAlchemy 2.x wants postgresql://
url = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

if url.startswith('sqlite'):
    engine = enable_sqlite_foreign_keys(
        create_engine(url, connect_args={'check_same_thread': False})
    )
else:
    engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)

SessionLocal = sessionmaker(bind=engine)


def get_session():
    """New session; callers close it in a finally block."""
    return SessionLocal()
