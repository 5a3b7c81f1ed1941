from contextlib import contextmanager
from typing import Any, Generator, Type, TypeVar

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from core.config import settings
from core.exceptions import CatalogError, ConstraintViolation, RecordNotFound, translate_integrity_error

T = TypeVar("T")


class Base(DeclarativeBase):
    pass


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE/RESTRICT unless the pragma is set per connection."""

    @event.listens_for(target, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Configure engine based on database type
if settings.DATABASE_URL.startswith("sqlite"):
    # For SQLite, use StaticPool for in-memory databases and enable foreign keys
    engine = create_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool if ":memory:" in settings.DATABASE_URL else None,
    )
    enable_sqlite_foreign_keys(engine)
else:
    # For PostgreSQL and other databases
    engine = create_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,
        future=True,
    )

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db: Session) -> None:
    """Commit, or roll back and re-raise store errors as catalog errors."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise translate_integrity_error(exc) from exc
    except CatalogError:
        db.rollback()
        raise


@contextmanager
def transaction(db: Session) -> Generator:
    """
    Run a write and everything it implies as one unit: commit at the end,
    or roll the whole unit back if anything inside raised.
    """
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    commit_or_raise(db)


def apply_changes(obj: Any, changes: dict, read_only: tuple = ("id", "created_at", "updated_at")) -> None:
    """Copy column values onto a mapped object, refusing names that are not writable columns."""
    columns = {column.key for column in inspect(type(obj)).column_attrs}
    for key, value in changes.items():
        if key in read_only or key not in columns:
            raise ConstraintViolation(f"{type(obj).__name__} has no writable field {key!r}", field=key)
        setattr(obj, key, value)


def get_or_raise(db: Session, model: Type[T], record_id: Any) -> T:
    obj = db.get(model, record_id)
    if obj is None:
        raise RecordNotFound(model.__name__, record_id)
    return obj


@contextmanager
def db_session() -> Generator:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
