"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Repository and service code raises these directly; because they are
HTTPException subclasses they reach API clients with the right status code
without per-route handling.

Usage:
    from roster.utils.exceptions import NotFoundError, ValidationError
    raise NotFoundError("Member not found")
    raise ValidationError("Unknown field 'nickname' on Member")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 레코드를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised by get-or-fail lookups and by team assignment to a missing team.
    Collection queries return an empty list instead.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationError(HTTPException):
    """400 Bad Request 예외 — 잘못된 조건/정렬/페이지 요청 시 사용.

    400 Bad Request exception.
    Raised before any SQL runs when a predicate, sort, mutation, or page
    request references an unknown field or carries an invalid value.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid query")
    """

    def __init__(self, detail: str = "Invalid query") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class RelationNotFoundError(HTTPException):
    """500 예외 — 참조 대상이 저장소에 없음 (저장소 일관성 위반).

    500 Internal Server Error exception.
    Raised when a stored foreign key points at a row that no longer exists.
    Assignments are validated on write, so this signals a consistency violation.

    Args:
        detail: 오류 메시지 (Error message, default: "Referenced record is missing")
    """

    def __init__(self, detail: str = "Referenced record is missing") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
