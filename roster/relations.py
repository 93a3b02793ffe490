"""연관관계 해석기 — 지연/즉시 로딩 전략.

Relation resolver — Lazy and eager fetch strategies for a many-to-one relation.

Relationships are mapped with ``lazy="raise"``, so touching an unloaded
``member.team`` raises instead of emitting hidden SQL. Loading is an explicit
step on this resolver:

- LAZY: ``resolve(member)`` loads the team referenced by ``member.team_id``
  the first time it is asked for that instance; later calls reuse it.
- EAGER: ``resolve_all(members)`` loads every referenced team with one IN
  query; fetch-join query results are registered with ``mark_resolved``.

State per instance: UNRESOLVED -> RESOLVING -> RESOLVED. ``reset()`` (called
by UnitOfWork.clear) returns every instance to UNRESOLVED. One resolver
belongs to exactly one unit of work.
"""

import logging
import weakref
from enum import Enum
from typing import Any, Iterable

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.orm.attributes import set_committed_value

from roster.models.member import Member
from roster.utils.exceptions import RelationNotFoundError

logger = logging.getLogger(__name__)


class FetchStrategy(str, Enum):
    """연관 로딩 전략 (Relation fetch strategy)."""

    LAZY = "lazy"
    EAGER = "eager"


class ResolutionState(str, Enum):
    """인스턴스별 연관 해석 상태 (Per-instance resolution state)."""

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


class RelationResolver:
    """다대일 연관관계를 명시적으로 해석하는 해석기.

    Explicit resolver for one many-to-one relationship (``Member.team`` by default).

    Attributes:
        relation: 해석할 관계 속성 (Relationship attribute, e.g. Member.team)
        resolution_count: 지연 로딩 횟수 (Number of per-instance lazy loads)
        batch_count: 일괄 로딩 쿼리 횟수 (Number of eager IN-query batches)
    """

    def __init__(self, db: AsyncSession, relation: InstrumentedAttribute = Member.team) -> None:
        self._db: AsyncSession = db
        self.relation: InstrumentedAttribute = relation

        prop = relation.property
        self._key: str = relation.key
        self._target: type = prop.mapper.class_
        # 단일 컬럼 FK만 지원 (Single-column foreign keys only)
        (local_column,) = prop.local_columns
        self._fk_key: str = prop.parent.get_property_by_column(local_column).key
        (self._target_pk,) = inspect(self._target).primary_key

        self._states: weakref.WeakKeyDictionary[Any, ResolutionState] = weakref.WeakKeyDictionary()
        self.resolution_count: int = 0
        self.batch_count: int = 0

    def state_of(self, instance: Any) -> ResolutionState:
        return self._states.get(instance, ResolutionState.UNRESOLVED)

    def reset(self) -> None:
        """모든 인스턴스를 UNRESOLVED로 되돌리고 카운터를 초기화합니다.

        Forget every resolution; the next access reloads.
        """
        self._states = weakref.WeakKeyDictionary()
        self.resolution_count = 0
        self.batch_count = 0

    async def resolve(self, instance: Any, strategy: FetchStrategy = FetchStrategy.LAZY) -> Any:
        """인스턴스의 연관 대상을 반환합니다. 필요 시 한 번만 로딩합니다.

        Return the related object of ``instance``, loading it at most once per
        instance until the next reset. EAGER delegates to ``resolve_all``.

        Raises:
            RelationNotFoundError: FK가 존재하지 않는 행을 가리킬 때 (Dangling reference)
        """
        if strategy is FetchStrategy.EAGER:
            await self.resolve_all([instance])
            return getattr(instance, self._key)

        state = self.state_of(instance)
        if state is ResolutionState.RESOLVED:
            return getattr(instance, self._key)
        if state is ResolutionState.RESOLVING:
            raise RuntimeError(f"{self._key} of {instance!r} is already being resolved")

        self._states[instance] = ResolutionState.RESOLVING
        try:
            target = await self._load_one(instance)
        except Exception:
            self._states[instance] = ResolutionState.UNRESOLVED
            raise
        self._attach(instance, target)
        return target

    async def resolve_all(self, instances: Iterable[Any]) -> None:
        """아직 해석되지 않은 인스턴스들의 연관 대상을 한 번의 IN 쿼리로 로딩합니다.

        Load the related objects of every unresolved instance with one IN
        query and attach them.

        Raises:
            RelationNotFoundError: FK가 존재하지 않는 행을 가리킬 때 (Dangling reference)
        """
        pending = [i for i in instances if self.state_of(i) is not ResolutionState.RESOLVED]
        if not pending:
            return

        keys = {getattr(i, self._fk_key) for i in pending} - {None}
        targets: dict[Any, Any] = {}
        if keys:
            query = select(self._target).where(self._target_pk.in_(keys))
            result = await self._db.execute(query)
            targets = {getattr(t, self._target_pk.key): t for t in result.scalars().all()}
            self.batch_count += 1

        for instance in pending:
            key = getattr(instance, self._fk_key)
            if key is None:
                self._attach(instance, self._loaded_value(instance))
                continue
            if key not in targets:
                raise RelationNotFoundError(
                    f"{self._target.__name__} {key} referenced by {instance!r} does not exist"
                )
            self._attach(instance, targets[key])

    def mark_resolved(self, instances: Iterable[Any]) -> None:
        """fetch join 등으로 이미 채워진 인스턴스를 RESOLVED로 기록합니다.

        Record instances whose relation was populated by the query itself.
        Instances whose relation is still unloaded are left UNRESOLVED.
        """
        for instance in instances:
            if self._key in inspect(instance).dict:
                self._states[instance] = ResolutionState.RESOLVED

    async def _load_one(self, instance: Any) -> Any:
        key = getattr(instance, self._fk_key)
        if key is None:
            # 아직 플러시되지 않은 객체 참조는 그대로 사용 (Unflushed in-Python assignment)
            return self._loaded_value(instance)

        self.resolution_count += 1
        target = await self._db.get(self._target, key)
        if target is None:
            raise RelationNotFoundError(
                f"{self._target.__name__} {key} referenced by {instance!r} does not exist"
            )
        logger.debug("resolved %s.%s -> %r", type(instance).__name__, self._key, target)
        return target

    def _loaded_value(self, instance: Any) -> Any:
        return inspect(instance).dict.get(self._key)

    def _attach(self, instance: Any, target: Any) -> None:
        # 더티 플래그 없이 값 설정 (Set without marking the instance dirty)
        set_committed_value(instance, self._key, target)
        self._states[instance] = ResolutionState.RESOLVED
