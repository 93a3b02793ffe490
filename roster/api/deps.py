"""FastAPI 의존성 주입 모듈.

FastAPI dependency injection module.
Routers declare the request-scoped database session through ``DbSession``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db

# 요청 단위 세션 — 요청이 끝나면 커밋/롤백 (Request-scoped session, committed or rolled back at the end)
DbSession = Annotated[AsyncSession, Depends(get_db)]
