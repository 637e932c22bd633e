import logging
from contextlib import contextmanager
from typing import Callable, Generator, Iterator, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from topbanana.core.config import settings
from topbanana.core.exceptions import TransactionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign keys off; ON DELETE CASCADE depends on them
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 0,
    pool_recycle: int = 300,
    echo: bool = False,
) -> Engine:
    """Build an engine for the given URL.

    In-memory SQLite gets a single shared connection, otherwise every session
    would see its own empty database. File-backed databases use a queue pool
    bounded by ``pool_size`` and ``max_overflow``.
    """
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    kwargs = {"echo": echo}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    if is_sqlite and url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
        )

    engine = create_engine(url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _rollback(db: Session) -> None:
    try:
        db.rollback()
    except SQLAlchemyError as e:
        # Never shadow the error that triggered the rollback
        logger.error(f"❌ Error rolling back transaction: {e}")
    else:
        logger.info("↩️ Rolled back transaction")


@contextmanager
def transaction(session_factory: Callable[[], Session]) -> Iterator[Session]:
    """
    Scope a unit of work to one database transaction.

    Commits when the block exits normally. Any exception, including
    KeyboardInterrupt, rolls back before it propagates, so at most one of
    commit or rollback ever runs and the session is always closed.
    """
    db = session_factory()
    try:
        try:
            db.begin()
        except SQLAlchemyError as e:
            raise TransactionError("failed to begin transaction") from e

        try:
            yield db
        except BaseException:
            _rollback(db)
            raise

        try:
            db.commit()
        except SQLAlchemyError as e:
            _rollback(db)
            raise TransactionError("failed to commit transaction") from e
        logger.info("✅ Committed transaction")
    finally:
        db.close()


def run_in_transaction(
    session_factory: Callable[[], Session], fn: Callable[[Session], T]
) -> T:
    """Call ``fn`` with a transaction-scoped session and return its result"""
    with transaction(session_factory) as db:
        return fn(db)


engine = create_db_engine(
    settings.DATABASE_URL,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_recycle=settings.DB_POOL_RECYCLE,
    echo=settings.DB_ECHO,
)
SessionLocal = create_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
