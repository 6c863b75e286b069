# petgroom/utils/upload_utils.py
from typing import Tuple

from flask import Request
from marshmallow import ValidationError


def read_image_upload(request: Request, field_name: str = 'file') -> Tuple[bytes, str, str]:
    """
    multipart/form-data 요청에서 이미지 파일을 읽습니다.

    :return: (파일 바이트, 원본 파일명, MIME 타입)
    :raises ValidationError: 파일이 없거나 비어 있는 경우
    """
    file = request.files.get(field_name)
    if file is None or not file.filename:
        raise ValidationError({field_name: ["업로드할 이미지 파일이 필요합니다."]})

    data = file.read()
    if not data:
        raise ValidationError({field_name: ["업로드할 파일이 비어 있습니다."]})

    return data, file.filename, file.mimetype or 'application/octet-stream'
