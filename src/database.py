import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from src.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.SQLALCHEMY_DATABASE_URI, echo=False)
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

Base = declarative_base()

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


# Dependency
async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def is_concurrency_error(exc: DBAPIError) -> bool:
    """True when the driver reports a conflict that a fresh attempt may resolve."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True
    message = str(orig).lower()
    return "deadlock" in message or "could not serialize" in message or "database is locked" in message


async def run_in_transaction(
    session: AsyncSession,
    work: Callable[[AsyncSession], Awaitable[T]],
    attempts: Optional[int] = None,
) -> T:
    """Run ``work`` and commit, retrying the whole unit on concurrency failures.

    Any exception rolls the session back before it propagates, so either
    everything ``work`` wrote is committed or nothing is.
    """
    attempts = attempts or settings.DB_TRANSACTION_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            result = await work(session)
            await session.commit()
            return result
        except DBAPIError as e:
            await session.rollback()
            if attempt >= attempts or not is_concurrency_error(e):
                raise
            logger.warning("Transaction attempt %d/%d failed, retrying: %s", attempt, attempts, e.orig)
        except Exception:
            await session.rollback()
            raise
    raise RuntimeError("run_in_transaction called with no attempts")
