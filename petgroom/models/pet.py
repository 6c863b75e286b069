# petgroom/models/pet.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum
import logging

from petgroom.utils.datetime_utils import DateTimeUtils


class PetSpecies(Enum):
    DOG = "dog"
    CAT = "cat"
    OTHER = "other"


@dataclass
class Pet:
    """
    Firestore 'pets' 컬렉션 문서 구조.
    반려동물은 정확히 한 명의 소유자(user_id)에 속하며, 삭제 시 즉시 제거됩니다.
    나이(age)는 "3살", "8개월"처럼 자유 형식 문자열입니다.
    """
    pet_id: str
    user_id: str
    name: str
    species: PetSpecies = PetSpecies.DOG
    breed: Optional[str] = None
    age: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pet":
        """
        Firestore에서 받은 딕셔너리로부터 Pet 데이터클래스 인스턴스를 생성합니다.
        문자열로 저장된 species 값을 Enum으로 변환하고, Timestamp를 datetime으로 변환합니다.
        """
        processed_data = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}

        species = processed_data.get('species')
        if not isinstance(species, PetSpecies):
            try:
                processed_data['species'] = PetSpecies(species) if species else PetSpecies.OTHER
            except ValueError:
                logging.warning(f"Invalid PetSpecies value '{species}' for pet {processed_data.get('pet_id')}. Defaulting to OTHER.")
                processed_data['species'] = PetSpecies.OTHER

        processed_data['created_at'] = DateTimeUtils.from_firestore_timestamp(processed_data.get('created_at'))
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))
