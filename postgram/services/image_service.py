# postgram/services/image_service.py

import io
import logging
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from postgram.core.errors import UploadError

JPEG_CONTENT_TYPE = "image/jpeg"

def normalize_image(raw: bytes, max_size: Tuple[int, int] = (800, 800), quality: int = 80,
                    max_pixels: Optional[int] = None) -> bytes:
    """
    업로드된 원본 이미지를 게시글용 JPEG로 정규화합니다.
    - 디코딩 전에 픽셀 수(가로x세로)가 max_pixels를 넘으면 거부
    - EXIF 회전 정보를 반영한 뒤 RGB 채널로 통일
    - max_size 안에 비율을 유지하며 맞춤 (원본이 더 작으면 확대하지 않음)
    - 지정한 품질로 JPEG 재인코딩

    :param raw: 원본 이미지 바이트
    :param max_pixels: 허용할 최대 픽셀 수 (None이면 Pillow 기본 제한만 적용)
    :return: 정규화된 JPEG 바이트
    """
    try:
        # Image.open()은 헤더만 읽으므로 size 확인 시점에는 아직 픽셀을 디코딩하지 않습니다.
        image = Image.open(io.BytesIO(raw))
        width, height = image.size
        if max_pixels is not None and width * height > max_pixels:
            raise UploadError(f"이미지 해상도가 너무 큽니다. ({width}x{height})")

        image = ImageOps.exif_transpose(image)

        # JPEG는 알파 채널을 지원하지 않으므로 RGB로 통일
        if image.mode != "RGB":
            image = image.convert("RGB")

        # thumbnail()은 비율을 유지하며 축소만 수행합니다.
        image.thumbnail(max_size)

        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()
    except UploadError:
        raise
    except Image.DecompressionBombError as e:
        logging.warning(f"이미지 해상도 제한 초과: {e}")
        raise UploadError("이미지 해상도가 너무 큽니다.")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logging.error(f"이미지 변환 실패: {e}", exc_info=True)
        raise UploadError("이미지를 처리할 수 없습니다. 지원되는 이미지 파일인지 확인해주세요.")
