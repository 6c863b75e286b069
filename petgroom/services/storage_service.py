# petgroom/services/storage_service.py
import logging
from flask import Flask
from firebase_admin import storage


class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 범용 서비스 클래스입니다.
    이미지 바이트를 고정된 경로에 업로드(같은 경로면 덮어쓰기)하고 공개 URL을 반환합니다.
    """

    def __init__(self):
        """
        클래스 인스턴스 생성 시 버킷을 None으로 초기화합니다.
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        """
        self.bucket = None
        self.allowed_extensions = set()

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        self.allowed_extensions = set(app.config.get('ALLOWED_IMAGE_EXTENSIONS', ()))
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def build_path(self, upload_type: str, filename: str, **keys: str) -> str:
        """
        업로드 목적에 따라 저장 경로를 결정합니다.
        경로는 소유자/대상 ID로 고정되므로 재업로드 시 기존 파일을 덮어씁니다.

        :param upload_type: "avatar", "pet_image", "service_image" 중 하나
        :param filename: 원본 파일명 (확장자 파악에 사용)
        """
        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        if self.allowed_extensions and extension not in self.allowed_extensions:
            raise ValueError(f"'{extension or filename}'은(는) 허용되지 않는 이미지 형식입니다.")

        path_map = {
            "avatar": "avatars/{user_id}/avatar",
            "pet_image": "pets/{user_id}/{pet_id}",
            "service_image": "services/{service_id}",
        }
        template = path_map.get(upload_type)
        if not template:
            raise ValueError(f"'{upload_type}'은(는) 유효한 업로드 타입이 아닙니다.")

        try:
            return f"{template.format(**keys)}.{extension}"
        except KeyError as e:
            raise ValueError(f"'{upload_type}' 경로를 만들기 위한 키가 없습니다: {e}")

    def upload_image(self, upload_type: str, data: bytes, filename: str, content_type: str, **keys: str) -> str:
        """
        이미지를 업로드하고 공개 URL을 반환합니다.

        :param data: 업로드할 파일 바이트
        :param content_type: 파일의 MIME 타입 (예: "image/jpeg")
        :return: 공개적으로 접근 가능한 URL
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")
        if not data:
            raise ValueError("업로드할 파일이 비어 있습니다.")

        file_path = self.build_path(upload_type, filename, **keys)
        blob = self.bucket.blob(file_path)
        try:
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
        except Exception as e:
            logging.error(f"이미지 업로드 실패 (path: {file_path}): {e}", exc_info=True)
            raise

        logging.info(f"Image uploaded to {file_path}")
        return blob.public_url
