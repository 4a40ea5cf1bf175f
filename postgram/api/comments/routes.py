# postgram/api/comments/routes.py
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError as SchemaValidationError

from postgram.api.comments.schemas import CommentCreateSchema, CommentResponseSchema
from postgram.core.errors import ApiError
from postgram.core.responses import (
    success_response, error_response, api_error_response, unhandled_error_response
)


comments_bp = Blueprint('comments_bp', __name__)

@comments_bp.route('/posts/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    """
    특정 게시글에 새로운 댓글을 작성합니다.
    - 성공 시, 생성된 댓글 정보를 201 Created 상태 코드와 함께 반환합니다.
    - 게시글이 없으면 404를 반환하며 댓글은 저장되지 않습니다.
    """
    comment_service = current_app.services['comments']
    user_id = get_jwt_identity()
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        new_comment = comment_service.create_comment(post_id, user_id, data['text'])
        return success_response(201, "댓글이 작성되었습니다.", comment=CommentResponseSchema().dump(new_comment))
    except SchemaValidationError as err:
        return error_response(400, "댓글 내용은 필수입니다.", error_code="VALIDATION_ERROR", details=err.messages)
    except ApiError as e:
        return api_error_response(e)
    except Exception as e:
        return unhandled_error_response("댓글 작성에 실패했습니다.", e)

@comments_bp.route('/posts/<string:post_id>/comments', methods=['GET'])
def get_comments(post_id: str):
    """
    특정 게시글의 댓글 목록을 최신순으로 조회합니다. 댓글이 없으면 빈 목록을 반환합니다.
    """
    comment_service = current_app.services['comments']
    try:
        comments = comment_service.get_comments_for_post(post_id)
        return success_response(200, comments=CommentResponseSchema(many=True).dump(comments))
    except Exception as e:
        return unhandled_error_response("댓글 목록 조회에 실패했습니다.", e)
