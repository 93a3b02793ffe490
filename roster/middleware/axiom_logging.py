"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Emits one structured event per API request: resource, method, path, query
string, JSON body, status code, duration and error detail. Events are
ingested into Axiom when a token and dataset are configured; otherwise they
go to this module's logger so local runs still see every request.
Keys that look like credentials are masked before anything is emitted.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roster.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 키 — Keys masked in bodies and query strings
_SENSITIVE_KEYS = re.compile(r"(password|passwd|secret|token|authorization|api_?key|credential)", re.IGNORECASE)

# 로깅 제외 경로 — Paths never logged
_SKIP_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
_API_PREFIX = "/api/v1/"


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 키 마스킹 — Recursively replace credential-like values with ``***``."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            key: "***" if _SENSITIVE_KEYS.search(key) else mask_sensitive(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


def truncate(value: Any, max_len: int = 2000) -> Any:
    """긴 문자열 자르기 — Cap string values so one event stays small."""
    if isinstance(value, str) and len(value) > max_len:
        return f"{value[:max_len]}...(truncated)"
    return value


def resource_of(path: str) -> str | None:
    """``/api/v1/members/3`` → ``members``. API 밖의 경로는 None."""
    if not path.startswith(_API_PREFIX):
        return None
    return path[len(_API_PREFIX):].split("/", 1)[0] or None


async def _read_json_body(request: Request) -> Any:
    if request.method not in _BODY_METHODS:
        return None
    raw = await request.body()
    if not raw:
        return None
    try:
        return truncate(mask_sensitive(json.loads(raw)))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


async def _buffer_error_response(response: Response) -> tuple[Response, str]:
    """에러 응답 본문을 읽어 사유를 추출하고, 같은 내용의 응답을 다시 만듭니다.

    Drain an error response, pull out its ``detail`` and return a replayable
    copy of the response alongside it.
    """
    body = b""
    async for chunk in response.body_iterator:
        body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

    try:
        detail = str(json.loads(body).get("detail", ""))
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        detail = body.decode("utf-8", errors="replace")

    replay = Response(
        content=body,
        status_code=response.status_code,
        headers=dict(response.headers),
        media_type=response.media_type,
    )
    return replay, detail[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """API 요청마다 구조화된 이벤트 하나를 남기는 미들웨어.

    Request logging middleware. Events go to Axiom when AXIOM_API_TOKEN and
    AXIOM_DATASET are set, otherwise to the ``roster.middleware.axiom_logging``
    logger at INFO.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = (
            AxiomClient(token=settings.AXIOM_API_TOKEN)
            if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET
            else None
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        event: dict[str, Any] = {
            "resource": resource_of(request.url.path),
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request.query_params:
            # sort 등 반복 파라미터 보존 — Keep repeated params such as sort
            event["query_params"] = mask_sensitive(
                {key: request.query_params.getlist(key) for key in request.query_params.keys()}
            )
        body = await _read_json_body(request)
        if body is not None:
            event["request_body"] = body

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code
            if response.status_code >= 400:
                response, event["error"] = await _buffer_error_response(response)
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            self._emit(event)

        return response

    def _emit(self, event: dict[str, Any]) -> None:
        if self._client is None:
            logger.info(
                "%s %s -> %s (%.2f ms)",
                event["method"], event["path"], event["status_code"], event["duration_ms"],
                extra={"event": event},
            )
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            # 로깅 실패로 요청을 깨뜨리지 않음 — Ingest failures only produce a warning
            logger.warning("axiom ingest failed for %s %s", event["method"], event["path"], exc_info=True)
