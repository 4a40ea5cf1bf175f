# postgram/api/comments/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE
from postgram.api.users.schemas import AuthorSchema # 작성자 요약 스키마는 사용자 스키마의 것을 재사용

class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    댓글 생성을 요청할 때의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    class Meta:
        unknown = EXCLUDE

    text = fields.Str(required=True, validate=validate.Length(min=1, error="댓글 내용은 비어 있을 수 없습니다."))

class CommentResponseSchema(Schema):
    """
    댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다.
    """
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    author = fields.Nested(AuthorSchema, allow_none=True)
    text = fields.Str(required=True)
    created_at = fields.DateTime(required=True)
