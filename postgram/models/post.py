# postgram/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from postgram.utils.datetime_utils import DateTimeUtils

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - author: 작성자 user_id (생성 후 변경되지 않음)
    - comments: 댓글 ID 목록 (추가된 순서 = 작성 순서)
    - likes: 좋아요를 누른 user_id 목록 (ArrayUnion/ArrayRemove로만 갱신되어 집합처럼 동작)
    """
    post_id: str
    author: str
    image: str
    caption: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
