# postgram/api/users/schemas.py
from marshmallow import Schema, fields

class AuthorSchema(Schema):
    """게시글/댓글 응답에 포함될 작성자 요약 정보 스키마."""
    user_id = fields.Str(required=True)
    username = fields.Str(allow_none=True)
    profile_picture = fields.URL(allow_none=True)
