# postgram/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정 및 공통 응답
from postgram.core.config import config_by_name
from postgram.core.errors import ApiError
from postgram.core.responses import error_response, api_error_response

# - API 블루프린트
from postgram.api.posts.routes import posts_bp
from postgram.api.comments.routes import comments_bp

# - 서비스 모듈
from postgram.services.storage_service import StorageService
from postgram.services.media_service import MediaService
from postgram.api.users.services import UserService
from postgram.api.posts.services import PostService
from postgram.api.comments.services import CommentService


def _init_firebase(app: Flask):
    """firebase_admin 기본 앱을 한 번만 초기화합니다."""
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name=None, db=None, bucket=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production' (기본값: FLASK_ENV)
    :param db: Firestore 클라이언트. 없으면 firebase_admin으로 생성합니다.
    :param bucket: Storage 버킷. 없으면 설정의 FIREBASE_STORAGE_BUCKET으로 엽니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return error_response(401, "로그인이 필요합니다.", error_code="UNAUTHORIZED", error=reason)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return error_response(401, "유효하지 않은 토큰입니다.", error_code="INVALID_TOKEN", error=reason)

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return error_response(401, "토큰이 만료되었습니다.", error_code="TOKEN_EXPIRED")

    if db is None or bucket is None:
        _init_firebase(app)
    if db is None:
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스 먼저 생성
    try:
        storage_instance = StorageService()
        storage_instance.init_app(app, bucket=bucket)
        app.services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    app.services['media'] = MediaService(
        storage_service=app.services['storage'],
        max_size=app.config['IMAGE_MAX_SIZE'],
        quality=app.config['IMAGE_QUALITY'],
        folder=app.config['POST_IMAGE_FOLDER'],
        max_pixels=app.config['IMAGE_MAX_PIXELS']
    )

    # 5-2. Firestore 클라이언트를 주입받는 도메인 서비스 생성
    app.services['users'] = UserService(db)
    app.services['posts'] = PostService(db, user_service=app.services['users'])
    app.services['comments'] = CommentService(db, user_service=app.services['users'])

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api')

    @app.route('/health')
    def health_check():
        return jsonify({"status": "ok"})

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return error_response(400, "입력값이 올바르지 않습니다.", error_code="VALIDATION_ERROR", details=err.messages)

    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return api_error_response(err)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 404(없는 경로), 405, 413(업로드 용량 초과) 등 Flask/Werkzeug가 발생시키는 오류
        return error_response(err.code, err.description, error_code=err.name.upper().replace(' ', '_'))

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        detail = str(err) if app.config.get('EXPOSE_ERROR_DETAILS') else None
        return error_response(500, "서버 내부에서 예상치 못한 오류가 발생했습니다.", error_code="INTERNAL_SERVER_ERROR", error=detail)

    # =====================================================================================
    # 8. 앱 반환
    # =====================================================================================
    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
