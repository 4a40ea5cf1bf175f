# postgram/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime

from postgram.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    생성 이후 수정되지 않으며, 게시글 삭제 시에만 함께 삭제됩니다.
    """
    comment_id: str
    post_id: str
    author: str  # 작성자 user_id
    text: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
