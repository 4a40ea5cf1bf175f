# postgram/api/users/services.py
import logging
from typing import Optional, Dict, Any, Iterable

from firebase_admin import firestore

from postgram.core.errors import NotFoundError
from postgram.models.user import USER_SECRET_FIELDS, AUTHOR_SUMMARY_FIELDS
from postgram.utils.datetime_utils import DateTimeUtils

BOOKMARK_SAVED = "saved"
BOOKMARK_UNSAVED = "unsaved"

class UserService:
    """
    사용자 문서와 관련된 로직을 담당하는 서비스 클래스.
    - 게시글/댓글 응답에 작성자 정보를 붙이는 조회 시점 조인(population)
    - 사용자별 북마크 토글
    사용자 문서 생성/인증은 외부 서비스의 책임입니다.
    """
    def __init__(self, db):
        self.db = db
        self.users_ref = self.db.collection('users')
        self.posts_ref = self.db.collection('posts')

    def get_user_ref(self, user_id: str):
        return self.users_ref.document(user_id)

    def get_author_detail(self, user_id: str) -> Optional[Dict[str, Any]]:
        """비밀번호 등 민감 필드를 제외한 사용자 문서 전체를 반환합니다. 문서가 없으면 None."""
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return None
        user_data = {k: v for k, v in doc.to_dict().items() if k not in USER_SECRET_FIELDS}
        user_data['user_id'] = doc.id
        return DateTimeUtils.from_firestore(user_data)

    def get_author_summaries(self, user_ids: Iterable[str]) -> Dict[str, Optional[Dict[str, Any]]]:
        """
        여러 사용자 ID에 대한 작성자 요약(username, profile_picture)을 한 번에 조회합니다.
        존재하지 않는 사용자는 None으로 매핑됩니다.
        """
        unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))
        summaries: Dict[str, Optional[Dict[str, Any]]] = {uid: None for uid in unique_ids}
        if not unique_ids:
            return summaries

        refs = [self.users_ref.document(uid) for uid in unique_ids]
        for snapshot in self.db.get_all(refs):
            if not snapshot.exists:
                continue
            data = snapshot.to_dict()
            summary = {'user_id': snapshot.id}
            summary.update({field: data.get(field) for field in AUTHOR_SUMMARY_FIELDS})
            summaries[snapshot.id] = summary
        return summaries

    def toggle_bookmark(self, user_id: str, post_id: str) -> str:
        """
        게시글을 북마크하거나 북마크를 해제합니다.
        이미 북마크된 게시글이면 해제('unsaved'), 아니면 추가('saved')합니다.
        """
        if not self.posts_ref.document(post_id).get().exists:
            raise NotFoundError("게시글을 찾을 수 없습니다.")

        user_ref = self.users_ref.document(user_id)
        user_doc = user_ref.get()
        if not user_doc.exists:
            raise NotFoundError("사용자를 찾을 수 없습니다.")

        bookmarks = user_doc.to_dict().get('bookmarks', [])
        if post_id in bookmarks:
            user_ref.update({'bookmarks': firestore.ArrayRemove([post_id])})
            logging.info(f"북마크 해제 (user_id: {user_id}, post_id: {post_id})")
            return BOOKMARK_UNSAVED

        user_ref.update({'bookmarks': firestore.ArrayUnion([post_id])})
        logging.info(f"북마크 추가 (user_id: {user_id}, post_id: {post_id})")
        return BOOKMARK_SAVED
