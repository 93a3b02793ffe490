"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates the team and member routers into one
router for inclusion in the FastAPI application.

Included routers:
    - teams: 팀 관리 (Team management)
    - members: 멤버 관리, 페이징, 일괄 변경 (Member management, paging, bulk updates)
"""

from fastapi import APIRouter

from roster.api.members import router as members_router
from roster.api.teams import router as teams_router

api_router: APIRouter = APIRouter()
api_router.include_router(teams_router, prefix="/teams", tags=["Teams"])
api_router.include_router(members_router, prefix="/members", tags=["Members"])
