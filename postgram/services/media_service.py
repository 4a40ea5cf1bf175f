# postgram/services/media_service.py
import logging
from typing import Optional, Tuple

from postgram.core.errors import ValidationError
from postgram.services import image_service
from postgram.services.storage_service import StorageService

class MediaService:
    """
    게시글 이미지 수집(ingestion)을 담당하는 서비스.
    원본 바이트 검증 -> 정규화(리사이즈/재인코딩) -> Storage 업로드 -> 공개 URL 반환 순서로 동작합니다.
    재시도는 하지 않습니다.
    """
    def __init__(self, storage_service: StorageService, max_size: Tuple[int, int] = (800, 800),
                 quality: int = 80, folder: str = 'posts', max_pixels: Optional[int] = None):
        self.storage_service = storage_service
        self.max_size = tuple(max_size)
        self.quality = quality
        self.folder = folder
        self.max_pixels = max_pixels

    def ingest_post_image(self, raw: Optional[bytes], user_id: str) -> str:
        """
        게시글 이미지를 정규화하여 업로드하고 공개 URL을 반환합니다.

        :raises ValidationError: 이미지가 없거나 비어 있는 경우 (Storage는 호출되지 않음)
        :raises UploadError: 이미지 변환 또는 업로드에 실패한 경우
        """
        if not raw:
            raise ValidationError("이미지는 필수입니다.")

        encoded = image_service.normalize_image(raw, max_size=self.max_size, quality=self.quality,
                                               max_pixels=self.max_pixels)
        destination = self.storage_service.build_destination(self.folder, user_id)
        url = self.storage_service.upload_bytes(encoded, destination, image_service.JPEG_CONTENT_TYPE)

        logging.info(f"게시글 이미지 업로드 완료 (user_id: {user_id}, {len(raw)} -> {len(encoded)} bytes)")
        return url
