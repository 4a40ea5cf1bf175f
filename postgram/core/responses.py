# postgram/core/responses.py
"""
모든 API가 공유하는 응답 봉투(envelope) 헬퍼.

성공: {"success": true, "message"?: str, ...payload}
실패: {"success": false, "message": str, "error_code"?: str, "error"?: str, "details"?: obj}
"""
import logging
from typing import Any, Optional

from flask import current_app, jsonify

from postgram.core.errors import ApiError


def success_response(status_code: int = 200, message: Optional[str] = None, **payload: Any):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body), status_code


def error_response(status_code: int, message: str, error_code: Optional[str] = None,
                   error: Optional[str] = None, details: Optional[Any] = None):
    body = {"success": False, "message": message}
    if error_code:
        body["error_code"] = error_code
    if error is not None:
        body["error"] = error
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def api_error_response(err: ApiError):
    """ApiError 하위 예외를 상태 코드에 맞는 실패 응답으로 변환합니다."""
    return error_response(err.status_code, err.message, error_code=err.error_code, details=err.details)


def unhandled_error_response(message: str, err: Exception):
    """
    예상하지 못한 예외를 500 응답으로 변환합니다.
    원본 예외 메시지는 EXPOSE_ERROR_DETAILS 설정이 켜진 환경에서만 'error' 필드로 노출됩니다.
    """
    logging.error(f"{message}: {err}", exc_info=True)
    detail = str(err) if current_app.config.get('EXPOSE_ERROR_DETAILS') else None
    return error_response(500, message, error_code="INTERNAL_SERVER_ERROR", error=detail)
