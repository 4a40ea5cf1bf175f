# postgram/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List, Tuple

from firebase_admin import firestore

from postgram.api.users.services import UserService
from postgram.core.errors import AuthorizationError, NotFoundError, ValidationError
from postgram.models.post import Post
from postgram.utils.datetime_utils import DateTimeUtils

# Firestore WriteBatch 한 번에 담을 수 있는 최대 쓰기 연산 수
MAX_BATCH_WRITES = 500

class PostService:
    """
    게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    모든 DB 상호작용과 핵심 로직을 포함합니다.
    """
    def __init__(self, db, user_service: UserService):
        self.db = db
        self.user_service = user_service
        self.posts_ref = self.db.collection('posts')
        self.comments_ref = self.db.collection('comments')

    def create_post(self, user_id: str, image_url: str, caption: Optional[str] = None) -> Dict[str, Any]:
        """
        새로운 게시글을 생성하고 작성자의 posts 목록에 게시글 ID를 추가합니다.
        두 쓰기는 하나의 배치로 커밋됩니다.
        """
        if not image_url:
            raise ValidationError("이미지는 필수입니다.")

        post_id = str(uuid.uuid4())
        new_post = Post(post_id=post_id, author=user_id, image=image_url, caption=caption)
        post_data = DateTimeUtils.for_firestore(asdict(new_post))

        author = self.user_service.get_author_detail(user_id)

        batch = self.db.batch()
        batch.set(self.posts_ref.document(post_id), post_data)
        if author is not None:
            batch.update(self.user_service.get_user_ref(user_id), {'posts': firestore.ArrayUnion([post_id])})
        else:
            logging.warning(f"작성자 문서가 없어 posts 목록을 갱신하지 않습니다 (user_id: {user_id})")
        batch.commit()
        logging.info(f"게시글 생성 완료 (post_id: {post_id}, user_id: {user_id})")

        if author is not None and post_id not in author.get('posts', []):
            author['posts'] = list(author.get('posts', [])) + [post_id]

        post_data['author'] = author
        return post_data

    def get_all_posts(self) -> List[Dict[str, Any]]:
        """모든 게시글을 최신순으로 조회합니다. 페이지네이션은 하지 않습니다."""
        query = self.posts_ref.order_by("created_at", direction=firestore.Query.DESCENDING)
        return self._populate_posts([doc.to_dict() for doc in query.stream()])

    def get_posts_by_author(self, author_id: str) -> List[Dict[str, Any]]:
        """특정 사용자가 작성한 게시글을 최신순으로 조회합니다."""
        query = self.posts_ref.where('author', '==', author_id).order_by("created_at", direction=firestore.Query.DESCENDING)
        return self._populate_posts([doc.to_dict() for doc in query.stream()])

    def like_post(self, post_id: str, user_id: str) -> None:
        """좋아요 추가. 이미 누른 경우 변화 없음 (ArrayUnion)."""
        post_doc = self._get_post_snapshot(post_id)
        post_doc.reference.update({'likes': firestore.ArrayUnion([user_id])})
        logging.info(f"게시글 좋아요 (post_id: {post_id}, user_id: {user_id})")

    def dislike_post(self, post_id: str, user_id: str) -> None:
        """좋아요 취소. 누르지 않았던 경우 변화 없음 (ArrayRemove)."""
        post_doc = self._get_post_snapshot(post_id)
        post_doc.reference.update({'likes': firestore.ArrayRemove([user_id])})
        logging.info(f"게시글 좋아요 취소 (post_id: {post_id}, user_id: {user_id})")

    def delete_post(self, post_id: str, user_id: str) -> None:
        """
        게시글을 삭제합니다. (작성자 본인만 가능)
        게시글에 달린 댓글과 작성자의 posts 목록에 있는 ID도 함께 제거합니다.
        """
        post_doc = self._get_post_snapshot(post_id)
        if post_doc.to_dict().get('author') != user_id:
            raise AuthorizationError("게시글을 삭제할 권한이 없습니다.")

        comment_docs = list(self.comments_ref.where('post_id', '==', post_id).stream())
        writes: List[Tuple[str, Any, Optional[Dict[str, Any]]]] = [
            ('delete', comment_doc.reference, None) for comment_doc in comment_docs
        ]

        user_ref = self.user_service.get_user_ref(user_id)
        if user_ref.get().exists:
            writes.append(('update', user_ref, {'posts': firestore.ArrayRemove([post_id])}))
        # 게시글 문서는 마지막 배치에서 삭제되도록 맨 뒤에 둡니다.
        writes.append(('delete', post_doc.reference, None))

        self._commit_in_chunks(writes)
        logging.info(f"게시글 삭제 완료 (post_id: {post_id}, 삭제된 댓글 수: {len(comment_docs)})")

    def _get_post_snapshot(self, post_id: str):
        post_doc = self.posts_ref.document(post_id).get()
        if not post_doc.exists:
            raise NotFoundError("게시글을 찾을 수 없습니다.")
        return post_doc

    def _commit_in_chunks(self, writes: List[Tuple[str, Any, Optional[Dict[str, Any]]]]) -> None:
        for start in range(0, len(writes), MAX_BATCH_WRITES):
            batch = self.db.batch()
            for op, ref, data in writes[start:start + MAX_BATCH_WRITES]:
                if op == 'delete':
                    batch.delete(ref)
                else:
                    batch.update(ref, data)
            batch.commit()

    def _fetch_comments(self, comment_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """댓글 ID 목록을 한 번에 조회하여 {comment_id: 댓글} 형태로 반환합니다."""
        unique_ids = list(dict.fromkeys(comment_ids))
        if not unique_ids:
            return {}
        refs = [self.comments_ref.document(cid) for cid in unique_ids]
        return {
            snapshot.id: DateTimeUtils.from_firestore(snapshot.to_dict())
            for snapshot in self.db.get_all(refs) if snapshot.exists
        }

    def _populate_posts(self, posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        게시글 목록에 작성자 요약과 댓글(최신순, 댓글 작성자 요약 포함)을 붙입니다.
        참조된 문서는 모두 일괄 조회하며, 지연 조회는 하지 않습니다.
        """
        posts = [DateTimeUtils.from_firestore(post) for post in posts]
        comments_by_id = self._fetch_comments([cid for post in posts for cid in post.get('comments', [])])

        user_ids = [post.get('author') for post in posts]
        user_ids += [comment.get('author') for comment in comments_by_id.values()]
        authors = self.user_service.get_author_summaries(user_ids)

        for post in posts:
            post_comments = [comments_by_id[cid] for cid in post.get('comments', []) if cid in comments_by_id]
            post_comments.sort(key=DateTimeUtils.sort_key, reverse=True)
            post['comments'] = [dict(comment, author=authors.get(comment.get('author'))) for comment in post_comments]
            post['author'] = authors.get(post.get('author'))
        return posts
