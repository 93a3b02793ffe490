"""작업 단위(Unit of Work) 모듈.

Unit of work module.
One UnitOfWork wraps one AsyncSession (one transaction) and owns the
relation resolver for that session. Boundaries are explicit: ``flush`` makes
pending writes visible to queries, ``clear`` drops the identity map and every
relation resolution, ``commit``/``rollback`` end the transaction.

Usage:
    async with unit_of_work() as uow:
        member = await member_repository.save(uow.session, Member(username="member1", age=10))
        await uow.flush()
        uow.clear()
        members = await uow.find(member_repository, strategy=FetchStrategy.EAGER)
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload

from roster.database import async_session
from roster.query.mutations import Mutation
from roster.query.predicates import Predicate
from roster.query.sort import Sort
from roster.relations import FetchStrategy, RelationResolver
from roster.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    """세션 하나와 그에 속한 연관 해석기를 묶는 작업 단위.

    A single transactional scope: one session, one relation resolver.
    Units of work never share instances or resolution state.

    Attributes:
        session: 비동기 데이터베이스 세션 (Async database session)
        resolver: 이 작업 단위 전용 연관 해석기 (Resolver scoped to this unit of work)
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session: AsyncSession = session
        self.resolver: RelationResolver = RelationResolver(session)

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    async def flush(self) -> None:
        """보류 중인 쓰기를 DB에 반영합니다 (Send pending writes to the database)."""
        await self.session.flush()

    def clear(self) -> None:
        """식별자 맵과 연관 해석 상태를 모두 비웁니다.

        Detach every instance and reset the resolver. Unflushed changes are
        discarded, so flush first when they matter.
        """
        self.session.expunge_all()
        self.resolver.reset()
        logger.debug("unit of work cleared")

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
        self.resolver.reset()

    async def find(
        self,
        repository: BaseRepository[Any],
        *predicates: Predicate,
        sort: Sort | None = None,
        strategy: FetchStrategy = FetchStrategy.LAZY,
    ) -> list[Any]:
        """지정한 로딩 전략으로 조회합니다.

        Run a repository query with the given fetch strategy. EAGER joins the
        resolver's relation into the query itself and records the results as
        resolved, so no per-instance load follows.
        """
        options = [joinedload(self.resolver.relation)] if strategy is FetchStrategy.EAGER else []
        items = await repository.find(self.session, *predicates, sort=sort, options=options)
        if strategy is FetchStrategy.EAGER:
            self.resolver.mark_resolved(items)
        return items

    async def bulk_update(
        self,
        repository: BaseRepository[Any],
        predicates: Sequence[Predicate],
        mutation: Mutation,
    ) -> int:
        """일괄 변경 후 작업 단위를 비워 이후 조회가 새 값을 보도록 합니다.

        Bulk update, then clear so every later read reloads fresh rows.
        """
        affected = await repository.bulk_update(self.session, predicates, mutation)
        self.clear()
        return affected


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession] = async_session,
) -> AsyncGenerator[UnitOfWork, None]:
    """새 세션으로 작업 단위를 열고, 정상 종료 시 커밋/예외 시 롤백합니다.

    Open a unit of work on a fresh session; commit on success, roll back on
    error, always close the session.
    """
    async with session_factory() as session:
        async with UnitOfWork(session) as uow:
            yield uow
