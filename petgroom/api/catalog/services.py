# petgroom/api/catalog/services.py
import logging
import uuid
from typing import List, Dict, Any, Iterable

from firebase_admin import firestore

from petgroom.models.service import Service, DEFAULT_RATING
from petgroom.services.firestore_service import fetch_documents_by_ids
from petgroom.services.storage_service import StorageService

logger = logging.getLogger(__name__)


class CatalogService:
    """
    미용 서비스 카탈로그를 관리하는 서비스 클래스.
    조회는 모든 사용자, 생성/수정/삭제는 관리자 라우트에서만 호출됩니다.
    """

    def __init__(self, storage_service: StorageService):
        self.db = firestore.client()
        self.services_ref = self.db.collection('services')
        self.storage_service = storage_service

    def get_services(self) -> List[Service]:
        """서비스 목록을 이름순으로 조회합니다."""
        try:
            docs = self.services_ref.order_by('name').stream()
            return [Service.from_dict(doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"서비스 목록 조회 실패: {e}", exc_info=True)
            raise

    def get_service(self, service_id: str) -> Service:
        doc = self.services_ref.document(service_id).get()
        if not doc.exists:
            raise FileNotFoundError("해당 ID의 서비스를 찾을 수 없습니다.")
        return Service.from_dict(doc.to_dict())

    def get_services_by_ids(self, service_ids: Iterable[str]) -> Dict[str, Service]:
        """예약 목록에 서비스 정보를 붙이기 위한 {service_id: Service} 조회 맵."""
        docs = fetch_documents_by_ids(self.services_ref, 'service_id', service_ids)
        return {service_id: Service.from_dict(data) for service_id, data in docs.items()}

    def create_service(self, service_data: Dict[str, Any]) -> Service:
        new_service = Service(
            service_id=str(uuid.uuid4()),
            name=service_data['name'],
            price=service_data['price'],
            description=service_data.get('description'),
            duration=service_data.get('duration'),
            rating=service_data.get('rating', DEFAULT_RATING),
        )
        self.services_ref.document(new_service.service_id).set(new_service.to_dict())
        logger.info(f"Service {new_service.service_id} ('{new_service.name}') created")
        return new_service

    def update_service(self, service_id: str, update_data: Dict[str, Any]) -> Service:
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")
        service_ref = self.services_ref.document(service_id)
        if not service_ref.get().exists:
            raise FileNotFoundError("해당 ID의 서비스를 찾을 수 없습니다.")
        service_ref.update(update_data)
        logger.info(f"Service {service_id} updated with fields: {list(update_data.keys())}")
        return self.get_service(service_id)

    def delete_service(self, service_id: str) -> None:
        """
        서비스를 삭제합니다.
        기존 예약은 service_id를 그대로 참조하며, 조회 시 서비스 정보 없이 표시됩니다.
        """
        service_ref = self.services_ref.document(service_id)
        if not service_ref.get().exists:
            raise FileNotFoundError("해당 ID의 서비스를 찾을 수 없습니다.")
        service_ref.delete()
        logger.info(f"Service {service_id} deleted")

    def update_service_image(self, service_id: str, data: bytes, filename: str, content_type: str) -> Service:
        self.get_service(service_id)
        image_url = self.storage_service.upload_image(
            "service_image", data, filename, content_type, service_id=service_id
        )
        return self.update_service(service_id, {'image_url': image_url})
