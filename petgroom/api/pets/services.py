# petgroom/api/pets/services.py
import logging
import uuid
from typing import Dict, Any, List, Optional

from firebase_admin import firestore

from petgroom.models.pet import Pet, PetSpecies
from petgroom.services.storage_service import StorageService


class PetService:
    """고객이 소유한 반려동물의 등록/수정/삭제와 이미지 관리를 전담하는 서비스."""

    def __init__(self, storage_service: StorageService):
        self.db = firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.storage_service = storage_service
        logging.info("PetService initialized with dependencies.")

    def get_pet_by_id_and_owner(self, pet_id: str, user_id: str) -> Optional[Pet]:
        """반려동물 정보를 가져와 소유자가 일치할 때만 Pet 객체로 반환합니다."""
        doc = self.pets_ref.document(pet_id).get()
        if doc.exists:
            pet_data = doc.to_dict()
            if pet_data.get('user_id') == user_id:
                return Pet.from_dict(pet_data)
        return None

    def get_pet_profile(self, pet_id: str, user_id: str) -> Pet:
        """[소유자 전용] 반려동물 정보를 조회합니다."""
        pet = self.get_pet_by_id_and_owner(pet_id, user_id)
        if not pet:
            raise PermissionError("반려동물을 조회할 권한이 없거나 반려동물을 찾을 수 없습니다.")
        return pet

    def get_pets(self, user_id: str) -> List[Pet]:
        """소유자의 반려동물 목록을 최근 등록순으로 조회합니다."""
        query = (self.pets_ref
                 .where('user_id', '==', user_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        return [Pet.from_dict(doc.to_dict()) for doc in query.stream()]

    def register_pet(self, user_id: str, pet_data: Dict[str, Any]) -> Pet:
        """새 반려동물을 등록합니다."""
        new_pet = Pet(
            pet_id=str(uuid.uuid4()),
            user_id=user_id,
            name=pet_data['name'],
            species=PetSpecies(pet_data.get('species', PetSpecies.DOG.value)),
            breed=pet_data.get('breed'),
            age=pet_data.get('age'),
        )
        try:
            self.pets_ref.document(new_pet.pet_id).set(new_pet.to_dict())
        except Exception as e:
            logging.error(f"Pet registration failed for user {user_id}: {e}", exc_info=True)
            raise
        logging.info(f"Pet {new_pet.pet_id} registered for user {user_id}")
        return new_pet

    def update_pet(self, pet_id: str, user_id: str, update_data: Dict[str, Any]) -> Pet:
        """반려동물 정보를 부분 업데이트합니다."""
        if not self.get_pet_by_id_and_owner(pet_id, user_id):
            raise PermissionError("반려동물을 수정할 권한이 없거나 반려동물을 찾을 수 없습니다.")
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")

        self.pets_ref.document(pet_id).update(update_data)
        logging.info(f"Pet {pet_id} updated with fields: {list(update_data.keys())}")

        updated_pet = self.get_pet_by_id_and_owner(pet_id, user_id)
        if not updated_pet:
            raise RuntimeError("업데이트된 반려동물 정보를 조회할 수 없습니다.")
        return updated_pet

    def delete_pet(self, pet_id: str, user_id: str) -> None:
        """반려동물을 즉시 삭제합니다. (복구 불가)"""
        if not self.get_pet_by_id_and_owner(pet_id, user_id):
            raise PermissionError("반려동물을 삭제할 권한이 없거나 반려동물을 찾을 수 없습니다.")
        self.pets_ref.document(pet_id).delete()
        logging.info(f"Pet {pet_id} deleted by owner {user_id}")

    def update_pet_image(self, pet_id: str, user_id: str, data: bytes, filename: str, content_type: str) -> Pet:
        """반려동물 이미지를 업로드하고 image_url을 갱신합니다."""
        if not self.get_pet_by_id_and_owner(pet_id, user_id):
            raise PermissionError("반려동물 이미지를 변경할 권한이 없거나 반려동물을 찾을 수 없습니다.")
        image_url = self.storage_service.upload_image(
            "pet_image", data, filename, content_type, user_id=user_id, pet_id=pet_id
        )
        return self.update_pet(pet_id, user_id, {'image_url': image_url})
