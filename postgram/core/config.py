# postgram/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 토큰 발급은 외부 인증 서비스가 담당하며, 이 서버는 검증만 합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 게시글 이미지 정규화 규칙: 800x800 안에 맞추고(fit inside) JPEG 품질 80으로 재인코딩합니다.
    IMAGE_MAX_SIZE = (800, 800)
    IMAGE_QUALITY = 80
    POST_IMAGE_FOLDER = 'posts'
    # 디코딩을 허용할 최대 픽셀 수. Pillow의 DecompressionBombWarning 기준(약 89M)보다 낮게 둡니다.
    IMAGE_MAX_PIXELS = 40_000_000

    # 업로드 요청 본문 최대 크기 (10MB). 초과 시 Flask가 413을 반환합니다.
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # 500 응답에 원본 예외 메시지를 'error' 필드로 포함할지 여부
    EXPOSE_ERROR_DETAILS = False

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    EXPOSE_ERROR_DETAILS = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    EXPOSE_ERROR_DETAILS = True
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'test-secret-key-do-not-use-in-production')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET', 'postgram-test.appspot.com')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경 설정. 내부 오류 메시지는 클라이언트에 노출하지 않습니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')

# create_app()에서 FLASK_ENV 값에 따라 설정 클래스를 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
