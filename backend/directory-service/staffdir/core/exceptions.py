from typing import Dict, Optional

from fastapi import status


class DirectoryError(Exception):
    """서비스 전체에서 쓰는 도메인 예외의 부모. main.py의 핸들러가 HTTP 응답으로 바꾼다."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "error"
    message: str = "Unexpected server error"

    def __init__(
        self,
        message: Optional[str] = None,
        field_errors: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.message
        self.field_errors = field_errors or {}
        super().__init__(self.message)


class InvalidInput(DirectoryError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"
    message = "Invalid input"


class AuthenticationFailed(DirectoryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "not_authenticated"
    message = "Could not validate credentials"


class PermissionDenied(DirectoryError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    message = "Admin privileges required"


class NotFound(DirectoryError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Entity not found"


class Conflict(DirectoryError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    message = "Conflicting entry"


class QuotaExceeded(Conflict):
    """기간 내 휴가 한도 초과."""

    code = "quota_exceeded"
    message = "Leave quota for this period has been reached"


class DuplicateDate(Conflict):
    """같은 날짜에 이미 휴가가 기록되어 있음."""

    code = "duplicate_date"
    message = "Leave is already recorded for this date"


class StorageUnavailable(DirectoryError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_unavailable"
    message = "Storage is unavailable, please retry"
