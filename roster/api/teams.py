"""팀 라우터 — 팀 생성/조회 엔드포인트.

Team Router — Create and read endpoints for teams.
"""

from fastapi import APIRouter

from roster.api.deps import DbSession
from roster.schemas.team import TeamCreate, TeamResponse
from roster.services.team_service import team_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[TeamResponse])
async def list_teams(db: DbSession) -> list[TeamResponse]:
    """팀 목록을 생성 순서대로 조회합니다 (List teams in creation order)."""
    return await team_service.list_teams(db)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(team_id: int, db: DbSession) -> TeamResponse:
    """팀을 조회합니다. 없으면 404.

    Retrieve one team.
    """
    return await team_service.get_team(db, team_id)


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(data: TeamCreate, db: DbSession) -> TeamResponse:
    return await team_service.create_team(db, data)
