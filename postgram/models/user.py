# postgram/models/user.py
from dataclasses import dataclass, field
from typing import Optional, List

# 작성자 정보를 응답에 포함할 때 절대 노출하지 않는 필드
USER_SECRET_FIELDS = ('password',)

# 목록 조회 시 게시글/댓글에 붙는 작성자 요약 필드
AUTHOR_SUMMARY_FIELDS = ('username', 'profile_picture')

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조.
    사용자 문서 자체는 인증/프로필 서비스가 관리하며, 이 서비스는 posts와 bookmarks 필드만 갱신합니다.
    """
    user_id: str
    username: str
    profile_picture: Optional[str] = None
    posts: List[str] = field(default_factory=list)      # 작성한 게시글 ID 목록
    bookmarks: List[str] = field(default_factory=list)  # 북마크한 게시글 ID 목록 (집합처럼 동작)
