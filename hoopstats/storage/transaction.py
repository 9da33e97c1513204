"""Unit-of-work execution under a single transaction boundary."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hoopstats.errors import STORAGE_EXCEPTIONS, classify_storage_error

R = TypeVar("R")

UnitOfWork = Callable[[AsyncSession], Awaitable[R]]


class TransactionManager:
    """
    Runs caller-supplied units of work against a fresh session.

    The session handed to the unit of work is the transactional executor:
    repositories built from it take part in the same transaction. Each call
    is one-shot: begin, run, then exactly one of commit or rollback.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        logger: structlog.stdlib.BoundLogger,
    ):
        self.session_maker = session_maker
        self.log = logger.bind(component="transaction")

    async def within_transaction(self, work: UnitOfWork[R]) -> R:
        """
        Execute ``work`` so its writes commit together or not at all.

        Raises:
            DomainError: raised by ``work`` itself (re-raised unchanged) or
                classified from a storage failure during ``work`` or commit.
        """
        async with self.session_maker() as session:
            committed = False
            try:
                await session.begin()
                result = await work(session)
                await session.commit()
                committed = True
                return result
            except STORAGE_EXCEPTIONS as e:
                raise classify_storage_error(e) from e
            finally:
                # Covers domain errors, commit failures and cancellation alike
                if not committed:
                    await self._rollback(session)

    async def with_session(self, work: UnitOfWork[R]) -> R:
        """
        Execute read-only ``work``. Nothing is committed.

        Closing the session ends its implicit transaction and detaches loaded
        rows without expiring them, so results stay readable afterwards.
        """
        try:
            async with self.session_maker() as session:
                return await work(session)
        except STORAGE_EXCEPTIONS as e:
            raise classify_storage_error(e) from e

    async def _rollback(self, session: AsyncSession) -> None:
        try:
            await session.rollback()
        except Exception as e:
            # The session is discarded right after; nothing left to undo
            self.log.warning("rollback_failed", error=str(e), error_type=type(e).__name__)
