"""
Shared plumbing for the engine services.

Each public service operation is one unit of work on the request's
AsyncSession: the domain write and its activity record are flushed together
and committed once. Database errors are translated into the AppError
taxonomy here so routers never see SQLAlchemy exceptions.
"""

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, TypeVar

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from talent_pipeline.core.config import settings
from talent_pipeline.errors import (
    AppError,
    ConcurrentUpdateError,
    DuplicateEntryError,
    OperationTimeoutError,
    StorageError,
)
from talent_pipeline.services.events import DomainEvent, EventPublisher, default_publisher

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique-constraint failures on both PostgreSQL and SQLite."""
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


def column_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Unwrap enum members so string columns receive plain values."""
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


def bounded(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Run a service coroutine under the service's ``timeout``.

    On expiry the session is rolled back and OperationTimeoutError is raised.
    """

    @functools.wraps(func)
    async def wrapper(self: "ServiceBase", *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.wait_for(func(self, *args, **kwargs), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            await self.db.rollback()
            logger.error("%s timed out after %.1fs", func.__qualname__, self.timeout)
            raise OperationTimeoutError(
                f"Operation timed out after {self.timeout:g} seconds",
                details={"operation": func.__name__},
            ) from exc

    return wrapper


class ServiceBase:
    """Session, event publisher and time budget shared by the engine services."""

    def __init__(
        self,
        db: AsyncSession,
        publisher: Optional[EventPublisher] = None,
        timeout: Optional[float] = None,
    ):
        self.db = db
        self.publisher = publisher or default_publisher
        self.timeout = timeout if timeout is not None else settings.OPERATION_TIMEOUT_SECONDS

    @asynccontextmanager
    async def unit_of_work(self, duplicate_message: Optional[str] = None) -> AsyncIterator[None]:
        """
        Commit everything flushed inside the block, or roll all of it back.

        An AppError raised before anything was flushed leaves the session
        untouched, so objects the caller already holds stay loaded.

        Args:
            duplicate_message: Message for DuplicateEntryError when the block
                trips a unique constraint.
        """
        flushed: List[bool] = []

        def mark_flushed(session: Session, flush_context: Any) -> None:
            flushed.append(True)

        event.listen(self.db.sync_session, "after_flush", mark_flushed)
        try:
            yield
            await self.db.commit()
        except AppError:
            if flushed or self.db.new or self.db.dirty or self.db.deleted:
                await self.db.rollback()
            raise
        except IntegrityError as exc:
            await self.db.rollback()
            if duplicate_message and is_unique_violation(exc):
                logger.warning("Duplicate rejected: %s", duplicate_message)
                raise DuplicateEntryError(duplicate_message) from exc
            logger.error("Integrity error: %s", exc.orig)
            raise StorageError(str(exc.orig)) from exc
        except StaleDataError as exc:
            await self.db.rollback()
            logger.warning("Stale write: %s", exc)
            raise ConcurrentUpdateError(
                "The record was modified by another user. Please retry."
            ) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Database error: %s", exc)
            raise StorageError(str(exc)) from exc
        finally:
            event.remove(self.db.sync_session, "after_flush", mark_flushed)

    def publish(
        self,
        name: str,
        resource_type: str,
        resource_id: Any,
        actor_id: Any = None,
        **details: Any,
    ) -> None:
        self.publisher.publish(
            DomainEvent(
                name=name,
                resource_type=resource_type,
                resource_id=resource_id,
                actor_id=actor_id,
                details=details,
            )
        )
