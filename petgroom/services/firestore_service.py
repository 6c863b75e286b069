# petgroom/services/firestore_service.py
import logging
from typing import Any, Dict, Iterable

# Firestore 'in' 쿼리는 한 번에 최대 30개의 값만 허용합니다.
IN_QUERY_LIMIT = 30


def fetch_documents_by_ids(collection_ref, id_field: str, ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """
    ID 목록에 해당하는 문서들을 조회하여 {id: 문서 딕셔너리} 형태의 조회용 맵으로 반환합니다.
    예약 목록에 반려동물/서비스/프로필 정보를 붙이는(join) 용도로 사용합니다.

    :param collection_ref: 조회할 Firestore 컬렉션 참조
    :param id_field: 문서 안에 저장된 ID 필드명 (예: 'pet_id')
    :param ids: 조회할 ID 목록 (중복/None은 무시)
    """
    unique_ids = list(dict.fromkeys(i for i in ids if i))
    result: Dict[str, Dict[str, Any]] = {}
    for i in range(0, len(unique_ids), IN_QUERY_LIMIT):
        chunk = unique_ids[i:i + IN_QUERY_LIMIT]
        try:
            for doc in collection_ref.where(id_field, 'in', chunk).stream():
                data = doc.to_dict()
                result[data.get(id_field, doc.id)] = data
        except Exception as e:
            logging.error(f"Firestore 일괄 조회 실패 ({id_field}, {len(chunk)}건): {e}", exc_info=True)
            raise
    return result
