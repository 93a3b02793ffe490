"""기본 레포지토리 — 모든 레포지토리의 부모 클래스.

Base Repository — Parent class for all domain repositories.
Provides the entity store (save, lookup, full scan), the predicate-based
query executor, paging, and the predicate-scoped bulk mutator.

Usage:
    class TeamRepository(BaseRepository[Team]):
        def __init__(self) -> None:
            super().__init__(Team)
"""

import logging
from typing import Any, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.base import ExecutableOption

from roster.database import Base
from roster.query.mutations import Mutation
from roster.query.predicates import Predicate, resolve_column, where_clause
from roster.query.sort import Sort
from roster.utils.exceptions import NotFoundError
from roster.utils.pagination import Page, PageRequest, paginate

logger = logging.getLogger(__name__)

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 레포지토리.

    Generic repository providing storage, querying, paging and bulk updates.
    Repositories are stateless; every call receives the session of the
    caller's unit of work.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    # ------------------------------------------------------------------
    # 저장소 — Entity store
    # ------------------------------------------------------------------

    async def save(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """엔티티를 저장하고 식별자를 부여받습니다.

        Add the entity to the session and flush so its identity is assigned.
        The same instance is returned.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: 저장할 엔티티 (Entity to persist)

        Returns:
            ModelType: 식별자가 부여된 동일 인스턴스 (The same instance, id assigned)
        """
        db.add(entity)
        await db.flush()
        return entity

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """딕셔너리로부터 새 레코드를 생성합니다.

        Create a new record from a dict of column values.
        """
        return await self.save(db, self.model(**obj_data))

    async def get_by_id(self, db: AsyncSession, record_id: int) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its identity.
        An instance already loaded in this session is returned as-is.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 ID (Identity of the record)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_or_fail(self, db: AsyncSession, record_id: int) -> ModelType:
        """ID로 조회하고 없으면 NotFoundError를 발생시킵니다.

        Retrieve a record by identity or raise.

        Raises:
            NotFoundError: 레코드가 없을 때 (No record with this identity)
        """
        entity: ModelType | None = await self.get_by_id(db, record_id)
        if entity is None:
            raise NotFoundError(f"{self.model.__name__} {record_id} not found")
        return entity

    async def find_all(
        self,
        db: AsyncSession,
        sort: Sort | None = None,
        options: Sequence[ExecutableOption] = (),
    ) -> list[ModelType]:
        """모든 레코드를 삽입 순서(또는 지정 정렬)로 조회합니다.

        Retrieve every record in insertion order, or by ``sort`` when given.
        """
        return await self.find(db, sort=sort, options=options)

    # ------------------------------------------------------------------
    # 쿼리 실행기 — Query executor
    # ------------------------------------------------------------------

    def build_query(
        self,
        *predicates: Predicate,
        sort: Sort | None = None,
        options: Sequence[ExecutableOption] = (),
    ) -> Select:
        """조건/정렬/로딩 옵션으로 SELECT 쿼리를 구성합니다.

        Build a SELECT for this model. Field references are validated here,
        before anything is sent to the database. Without a sort the result
        comes back in insertion (primary key) order.

        Raises:
            ValidationError: 알 수 없는 필드 참조 (Unknown predicate or sort field)
        """
        query: Select = select(self.model).where(where_clause(self.model, predicates))
        if options:
            query = query.options(*options)
        return query.order_by(*(sort or Sort.unsorted()).to_order_by(self.model))

    async def find(
        self,
        db: AsyncSession,
        *predicates: Predicate,
        sort: Sort | None = None,
        options: Sequence[ExecutableOption] = (),
    ) -> list[ModelType]:
        """모든 조건(AND)에 맞는 레코드를 조회합니다.

        Retrieve records matching all predicates.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            *predicates: AND로 결합될 조건들 (Predicates combined with AND)
            sort: 정렬 조건 (Sort; ties keep insertion order)
            options: 로더 옵션 (Loader options such as joinedload)

        Returns:
            list[ModelType]: 조회된 레코드 목록 (Matching records, empty when none)
        """
        query: Select = self.build_query(*predicates, sort=sort, options=options)
        result = await db.execute(query)
        return list(result.unique().scalars().all())

    async def find_one(self, db: AsyncSession, *predicates: Predicate) -> ModelType | None:
        """조건에 맞는 단일 레코드를 조회합니다. 둘 이상이면 MultipleResultsFound.

        Retrieve the single record matching the predicates, or None.
        """
        result = await db.execute(self.build_query(*predicates))
        return result.scalar_one_or_none()

    async def find_page(
        self,
        db: AsyncSession,
        *predicates: Predicate,
        page_request: PageRequest,
        options: Sequence[ExecutableOption] = (),
    ) -> Page[ModelType]:
        """조건에 맞는 레코드를 페이지 단위로 조회합니다.

        Retrieve one page of matching records. The total count covers every
        match before slicing; the sort is applied before slicing.
        """
        query: Select = self.build_query(*predicates, sort=page_request.sort, options=options)
        count_query: Select = (
            select(func.count())
            .select_from(self.model)
            .where(where_clause(self.model, predicates))
        )
        return await paginate(db, query, page_request, count_query=count_query)

    async def project(
        self,
        db: AsyncSession,
        fields: Iterable[str],
        *predicates: Predicate,
        sort: Sort | None = None,
    ) -> list[dict[str, Any]]:
        """지정한 컬럼만 조회합니다. 결과는 추적되지 않는 딕셔너리입니다.

        Project the named columns of matching records into plain dicts.
        Projections are not tracked by the session and never write back.
        """
        columns = [resolve_column(self.model, name) for name in fields]
        query: Select = (
            select(*columns)
            .where(where_clause(self.model, predicates))
            .order_by(*(sort or Sort.unsorted()).to_order_by(self.model))
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def count(self, db: AsyncSession, *predicates: Predicate) -> int:
        """조건에 맞는 레코드 수를 셉니다 (Count matching records)."""
        query: Select = (
            select(func.count())
            .select_from(self.model)
            .where(where_clause(self.model, predicates))
        )
        return (await db.execute(query)).scalar() or 0

    async def exists(self, db: AsyncSession, *predicates: Predicate) -> bool:
        """조건에 일치하는 레코드가 존재하는지 확인합니다.

        Check if a record matching the predicates exists.
        """
        return await self.count(db, *predicates) > 0

    # ------------------------------------------------------------------
    # 일괄 변경 — Bulk mutator
    # ------------------------------------------------------------------

    async def bulk_update(
        self,
        db: AsyncSession,
        predicates: Sequence[Predicate],
        mutation: Mutation,
        clear_automatically: bool = False,
    ) -> int:
        """조건에 맞는 모든 레코드에 변경을 한 번의 UPDATE로 적용합니다.

        Apply ``mutation`` to every record matching ``predicates`` with one
        UPDATE statement, so either every matched row changes or none does.
        Pending changes are flushed first. The identity map is not
        synchronized: instances loaded before the update keep their old values
        until the session is cleared. ``clear_automatically=True`` clears it
        right after the update.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            predicates: 대상 조건 (Predicates selecting the rows, combined with AND)
            mutation: 적용할 변경 (Mutation to apply)
            clear_automatically: 실행 후 세션 비우기 (Expunge all instances afterwards)

        Returns:
            int: 변경 전 조건에 일치한 행 수 (Rows matched by the predicates)

        Raises:
            ValidationError: 알 수 없는 필드 또는 잘못된 변경 (Unknown field or invalid mutation)
        """
        # SQL 실행 전 필드 검증 — Validate before touching the database
        values: dict[str, Any] = mutation.to_values(self.model)
        clause = where_clause(self.model, predicates)

        await db.flush()
        statement = (
            update(self.model)
            .where(clause)
            .values(values)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(statement)
        affected: int = result.rowcount
        logger.debug(
            "bulk update on %s (%s) matched %d rows",
            self.model.__tablename__, mutation, affected,
        )

        if clear_automatically:
            db.expunge_all()
        return affected
