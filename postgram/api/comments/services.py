# postgram/api/comments/services.py

import logging
import uuid
from dataclasses import asdict
from typing import Dict, Any, List

from firebase_admin import firestore

from postgram.api.users.services import UserService
from postgram.core.errors import NotFoundError, ValidationError
from postgram.models.comment import Comment
from postgram.utils.datetime_utils import DateTimeUtils

class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글 생성(게시글의 comments 목록 갱신 포함)과 게시글별 댓글 조회를 포함합니다.
    """
    def __init__(self, db, user_service: UserService):
        """서비스 초기화 시 Firestore 클라이언트 및 컬렉션 참조를 설정합니다."""
        self.db = db
        self.user_service = user_service
        self.comments_ref = self.db.collection('comments')
        self.posts_ref = self.db.collection('posts')

    def create_comment(self, post_id: str, author_id: str, text: str) -> Dict[str, Any]:
        """
        새로운 댓글을 생성하고 게시글의 comments 목록 끝에 댓글 ID를 추가합니다.
        게시글이 없으면 댓글을 만들지 않습니다.
        """
        if not text or not text.strip():
            raise ValidationError("댓글 내용은 필수입니다.")

        post_ref = self.posts_ref.document(post_id)
        if not post_ref.get().exists:
            raise NotFoundError("댓글을 작성할 게시물이 존재하지 않습니다.")

        comment_id = str(uuid.uuid4())
        new_comment = Comment(comment_id=comment_id, post_id=post_id, author=author_id, text=text)
        comment_data = DateTimeUtils.for_firestore(asdict(new_comment))

        batch = self.db.batch()
        batch.set(self.comments_ref.document(comment_id), comment_data)
        batch.update(post_ref, {'comments': firestore.ArrayUnion([comment_id])})
        batch.commit()
        logging.info(f"댓글 생성 완료 (comment_id: {comment_id}, post_id: {post_id}, author_id: {author_id})")

        authors = self.user_service.get_author_summaries([author_id])
        comment_data['author'] = authors.get(author_id)
        return comment_data

    def get_comments_for_post(self, post_id: str) -> List[Dict[str, Any]]:
        """특정 게시글의 댓글 전체를 최신순으로 조회합니다. 댓글이 없으면 빈 리스트를 반환합니다."""
        query = self.comments_ref.where('post_id', '==', post_id).order_by("created_at", direction=firestore.Query.DESCENDING)
        comments = [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]

        authors = self.user_service.get_author_summaries([c.get('author') for c in comments])
        for comment in comments:
            comment['author'] = authors.get(comment.get('author'))
        return comments
