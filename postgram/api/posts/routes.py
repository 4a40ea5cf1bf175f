# postgram/api/posts/routes.py
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError as SchemaValidationError

from postgram.api.posts.schemas import PostCreateSchema, PostResponseSchema, PostCreatedSchema
from postgram.api.users.services import BOOKMARK_SAVED
from postgram.core.errors import ApiError
from postgram.core.responses import (
    success_response, error_response, api_error_response, unhandled_error_response
)


posts_bp = Blueprint('posts_bp', __name__)

@posts_bp.route('/', methods=['POST'])
@jwt_required()
def create_post():
    """
    새로운 게시글을 생성합니다.
    - 멀티파트 요청의 'image' 파일은 필수, 'caption' 폼 필드는 선택입니다.
    - 이미지는 800x800 이내 JPEG(품질 80)로 변환되어 Storage에 업로드됩니다.
    - 성공 시, 생성된 게시글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    media_service = current_app.services['media']
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    # 업로드 용량 초과(413)는 전역 핸들러가 처리하도록 try 밖에서 본문을 읽습니다.
    form = request.form
    image = request.files.get('image')
    try:
        data = PostCreateSchema().load(form)
        raw = image.read() if image else None

        image_url = media_service.ingest_post_image(raw, user_id)
        new_post = post_service.create_post(user_id, image_url, data['caption'])
        return success_response(201, "게시글이 작성되었습니다.", post=PostCreatedSchema().dump(new_post))
    except SchemaValidationError as err:
        return error_response(400, "입력값이 올바르지 않습니다.", error_code="VALIDATION_ERROR", details=err.messages)
    except ApiError as e:
        return api_error_response(e)
    except Exception as e:
        return unhandled_error_response("게시글 작성에 실패했습니다.", e)

@posts_bp.route('/', methods=['GET'])
def get_posts():
    """
    전체 게시글 피드를 최신순으로 조회합니다. (작성자 및 댓글 정보 포함)
    """
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_all_posts()
        return success_response(200, posts=PostResponseSchema(many=True).dump(posts))
    except Exception as e:
        return unhandled_error_response("게시글 목록 조회에 실패했습니다.", e)

@posts_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_posts():
    """
    로그인한 사용자가 작성한 게시글을 최신순으로 조회합니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        posts = post_service.get_posts_by_author(user_id)
        return success_response(200, posts=PostResponseSchema(many=True).dump(posts))
    except Exception as e:
        return unhandled_error_response("내 게시글 조회에 실패했습니다.", e)

@posts_bp.route('/users/<string:author_id>/posts', methods=['GET'])
def get_user_posts(author_id: str):
    """
    특정 사용자가 작성한 게시글을 최신순으로 조회합니다. (프로필 화면의 게시물 목록)
    """
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_posts_by_author(author_id)
        return success_response(200, posts=PostResponseSchema(many=True).dump(posts))
    except Exception as e:
        return unhandled_error_response("사용자 게시글 조회에 실패했습니다.", e)

@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def like_post(post_id: str):
    """게시글에 좋아요를 누릅니다. 이미 누른 경우에도 200을 반환합니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.like_post(post_id, user_id)
        return success_response(200, "게시글에 좋아요를 눌렀습니다.")
    except ApiError as e:
        return api_error_response(e)
    except Exception as e:
        return unhandled_error_response("좋아요 처리에 실패했습니다.", e)

@posts_bp.route('/<string:post_id>/dislike', methods=['POST'])
@jwt_required()
def dislike_post(post_id: str):
    """게시글 좋아요를 취소합니다. 누르지 않았던 경우에도 200을 반환합니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.dislike_post(post_id, user_id)
        return success_response(200, "게시글 좋아요를 취소했습니다.")
    except ApiError as e:
        return api_error_response(e)
    except Exception as e:
        return unhandled_error_response("좋아요 취소 처리에 실패했습니다.", e)

@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """
    특정 게시글을 삭제합니다. (작성자 본인만 가능)
    - 게시글의 댓글과 작성자의 게시글 목록에 있는 ID도 함께 삭제됩니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.delete_post(post_id, user_id)
        return success_response(200, "게시글이 삭제되었습니다.")
    except ApiError as e:
        return api_error_response(e)
    except Exception as e:
        return unhandled_error_response("게시글 삭제에 실패했습니다.", e)

@posts_bp.route('/<string:post_id>/bookmark', methods=['POST'])
@jwt_required()
def toggle_bookmark(post_id: str):
    """
    게시글 북마크를 추가하거나 해제합니다.
    - 응답의 type 필드: 'saved'(추가) 또는 'unsaved'(해제)
    """
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        result = user_service.toggle_bookmark(user_id, post_id)
        message = "게시글을 북마크했습니다." if result == BOOKMARK_SAVED else "게시글 북마크를 해제했습니다."
        return success_response(200, message, type=result)
    except ApiError as e:
        return api_error_response(e)
    except Exception as e:
        return unhandled_error_response("북마크 처리에 실패했습니다.", e)
