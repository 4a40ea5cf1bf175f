# postgram/core/errors.py
from typing import Any, Optional


class ApiError(Exception):
    """
    API 경계에서 JSON 응답으로 변환되는 애플리케이션 예외의 기반 클래스.
    하위 클래스는 HTTP 상태 코드와 에러 코드를 고정합니다.
    """
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(ApiError):
    """필수 입력(이미지, 댓글 내용 등)이 누락되었거나 형식이 잘못된 경우"""
    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthorizationError(ApiError):
    """요청자가 대상 리소스에 대한 권한이 없는 경우 (예: 작성자가 아닌 사용자의 삭제 요청)"""
    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(ApiError):
    """게시글, 댓글 또는 사용자를 찾을 수 없는 경우"""
    status_code = 404
    error_code = "NOT_FOUND"


class UploadError(ApiError):
    """이미지 변환 또는 Storage 업로드에 실패한 경우"""
    status_code = 500
    error_code = "UPLOAD_FAILED"
