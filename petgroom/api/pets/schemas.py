# petgroom/api/pets/schemas.py
from marshmallow import Schema, fields, validate

from petgroom.models.pet import PetSpecies

SPECIES_VALUES = [e.value for e in PetSpecies]


class PetRegistrationSchema(Schema):
    """POST /api/pets/ 반려동물 등록 요청 스키마."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=30))
    species = fields.Str(load_default=PetSpecies.DOG.value, validate=validate.OneOf(SPECIES_VALUES))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Str(allow_none=True, validate=validate.Length(max=30))


class PetUpdateSchema(Schema):
    """PATCH /api/pets/<pet_id> 정보 수정을 위한 스키마 (부분 업데이트용)."""
    name = fields.Str(validate=validate.Length(min=1, max=30))
    species = fields.Str(validate=validate.OneOf(SPECIES_VALUES))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Str(allow_none=True, validate=validate.Length(max=30))


class PetResponseSchema(Schema):
    pet_id = fields.Str(dump_only=True)
    user_id = fields.Str(dump_only=True)
    name = fields.Str()
    species = fields.Function(lambda pet: pet.species.value)
    breed = fields.Str(allow_none=True)
    age = fields.Str(allow_none=True)
    image_url = fields.Str(allow_none=True)
    created_at = fields.DateTime()
