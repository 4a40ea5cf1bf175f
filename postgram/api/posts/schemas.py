# postgram/api/posts/schemas.py
from marshmallow import Schema, fields, EXCLUDE

from postgram.api.users.schemas import AuthorSchema
from postgram.api.comments.schemas import CommentResponseSchema

# --- API 요청/응답 스키마 ---

class PostCreateSchema(Schema):
    """POST /api/posts 멀티파트 폼 필드의 유효성을 검사합니다. (이미지 파일은 request.files로 별도 처리)"""
    class Meta:
        unknown = EXCLUDE

    caption = fields.Str(load_default=None, allow_none=True)

class PostResponseSchema(Schema):
    """게시글 목록 응답을 위한 최종 JSON 형식을 정의합니다."""
    post_id = fields.Str(dump_only=True)
    caption = fields.Str(allow_none=True)
    image = fields.URL(required=True)
    author = fields.Nested(AuthorSchema, allow_none=True)
    comments = fields.List(fields.Nested(CommentResponseSchema), dump_default=list)
    likes = fields.List(fields.Str(), dump_default=list)
    created_at = fields.DateTime(required=True)

class PostCreatedSchema(PostResponseSchema):
    """게시글 작성 직후 응답. 작성자 문서 전체(민감 필드 제외)를 포함합니다."""
    author = fields.Dict(allow_none=True)
