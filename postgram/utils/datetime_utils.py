# postgram/utils/datetime_utils.py
"""
게시글/댓글 타임스탬프를 일관되게 다루기 위한 시간 유틸리티 모듈

이 모듈의 목적:
1. 모든 타임스탬프를 UTC timezone-aware datetime으로 통일
2. Firestore 저장/조회 시 datetime 변환 일관성 확보
3. 정렬 키로 사용할 수 있는 안전한 created_at 값 제공
"""

import logging
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

# 정렬 시 created_at이 없는 문서를 가장 오래된 것으로 취급하기 위한 기준값
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 datetime 필드를 UTC timezone-aware datetime으로 변환
        (DatetimeWithNanoseconds 포함). dict/list 내부도 재귀적으로 변환합니다.
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    return obj.replace(tzinfo=timezone.utc)
                return obj.astimezone(timezone.utc)
            elif isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            logger.error(f"Firestore 읽기 변환 실패: {obj} ({type(obj)}) - {e}")
            # 변환 실패 시 원본 객체 반환 (로그만 남김)
            return obj

    @staticmethod
    def sort_key(doc: dict, field: str = 'created_at') -> datetime:
        """문서 목록을 created_at 기준으로 정렬할 때 사용하는 키 함수"""
        value = doc.get(field)
        if not isinstance(value, datetime):
            return EPOCH
        return DateTimeUtils.from_firestore(value)
