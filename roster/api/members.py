"""멤버 라우터 — 멤버 CRUD, 페이징, 프로젝션, 일괄 변경 엔드포인트.

Member Router — Endpoints for member creation, paged listing, DTO
projection, team assignment, and the bulk age update.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from roster.api.deps import DbSession
from roster.config import settings
from roster.schemas.member import (
    BulkAgePlusRequest,
    BulkUpdateResponse,
    MemberCreate,
    MemberDto,
    MemberResponse,
    MemberTeamUpdate,
)
from roster.services.member_service import member_service
from roster.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page[MemberResponse])
async def list_members(
    db: DbSession,
    page: int = 0,
    size: int = settings.DEFAULT_PAGE_SIZE,
    sort: Annotated[list[str], Query()] = [],
    age: int | None = None,
) -> Page[MemberResponse]:
    """멤버 목록을 페이지 단위로 조회합니다.

    List members one page at a time. ``sort`` may repeat, e.g.
    ``?sort=age,desc&sort=username``. Invalid paging or sort fields return 400.
    """
    return await member_service.list_members(db, page, size, sort, age=age)


@router.get("/dto", response_model=list[MemberDto])
async def list_member_dtos(db: DbSession) -> list[MemberDto]:
    """멤버 프로젝션(id, username, team_name) 목록을 조회합니다.

    List member projections; team_name is null for members without a team.
    """
    return await member_service.list_member_dtos(db)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: int, db: DbSession) -> MemberResponse:
    return await member_service.get_member(db, member_id)


@router.post("", response_model=MemberResponse, status_code=201)
async def create_member(data: MemberCreate, db: DbSession) -> MemberResponse:
    """멤버를 생성합니다. 존재하지 않는 팀을 지정하면 404.

    Create a member; an unknown team_id returns 404.
    """
    return await member_service.create_member(db, data)


@router.put("/{member_id}/team", response_model=MemberResponse)
async def assign_team(member_id: int, data: MemberTeamUpdate, db: DbSession) -> MemberResponse:
    """멤버의 소속 팀을 변경합니다 (Move a member to another team)."""
    return await member_service.assign_team(db, member_id, data.team_id)


@router.post("/bulk-age-plus", response_model=BulkUpdateResponse)
async def bulk_age_plus(data: BulkAgePlusRequest, db: DbSession) -> BulkUpdateResponse:
    """나이가 min_age 이상인 모든 멤버의 나이를 1 증가시킵니다.

    Add one year to every member aged min_age or older; returns the affected count.
    """
    return await member_service.bulk_age_plus(db, data.min_age)
