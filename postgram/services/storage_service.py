# postgram/services/storage_service.py
import uuid
import logging

from flask import Flask
from firebase_admin import storage

from postgram.core.errors import UploadError

class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 서비스 클래스입니다.
    서버에서 변환을 마친 이미지를 버킷에 올리고 공개 URL을 발급합니다.
    """

    def __init__(self):
        """
        클래스 인스턴스 생성 시 버킷을 None으로 초기화합니다.
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        """
        self.bucket = None

    def init_app(self, app: Flask, bucket=None):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.
        이 메서드는 create_app()에서 단 한 번만 호출됩니다.

        :param app: Flask 애플리케이션 객체
        :param bucket: 이미 생성된 버킷 객체 (테스트 등에서 주입). 없으면 설정값으로 버킷을 엽니다.
        """
        if bucket is not None:
            self.bucket = bucket
        else:
            bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
            if not bucket_name:
                raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")
            self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    @staticmethod
    def build_destination(folder: str, owner_id: str, extension: str = "jpg") -> str:
        """'{folder}/{owner_id}/{uuid}.{extension}' 형태의 고유한 저장 경로를 만듭니다."""
        return f"{folder}/{owner_id}/{uuid.uuid4()}.{extension}"

    def upload_bytes(self, data: bytes, destination: str, content_type: str, make_public: bool = True) -> str:
        """
        바이트 데이터를 지정한 경로에 업로드하고 접근 가능한 URL을 반환합니다.

        :param data: 업로드할 파일 내용
        :param destination: 버킷 내 저장 경로
        :param content_type: 파일의 MIME 타입 (예: "image/jpeg")
        :param make_public: True이면 파일을 공개로 전환하고 public URL을 반환
        :return: 업로드된 파일의 URL
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        blob = self.bucket.blob(destination)
        try:
            blob.upload_from_string(data, content_type=content_type)
            if make_public:
                blob.make_public()
            url = blob.public_url
        except Exception as e:
            logging.error(f"Storage 업로드 실패 (path: {destination}): {e}", exc_info=True)
            raise UploadError("이미지 업로드 중 오류가 발생했습니다.") from e

        if not url:
            raise UploadError("업로드된 이미지의 URL을 발급받지 못했습니다.")

        logging.info(f"Storage 업로드 완료: {destination}")
        return url
