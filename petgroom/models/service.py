# petgroom/models/service.py
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

DEFAULT_RATING = 5.0


@dataclass
class Service:
    """
    Firestore 'services' 컬렉션 문서 구조 (관리자가 관리하는 미용 서비스 카탈로그).
    예약은 서비스를 참조만 하며 소유하지 않습니다.
    """
    service_id: str
    name: str
    price: float
    description: Optional[str] = None
    duration: Optional[str] = None  # "1h 30m" 같은 자유 형식
    image_url: Optional[str] = None
    rating: float = DEFAULT_RATING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        processed = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        processed['price'] = float(processed.get('price') or 0)
        if processed.get('rating') is None:
            processed['rating'] = DEFAULT_RATING
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
