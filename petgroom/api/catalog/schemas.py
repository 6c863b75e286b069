# petgroom/api/catalog/schemas.py
from marshmallow import Schema, fields, validate


class ServiceCreateSchema(Schema):
    """POST /api/catalog/ 서비스 생성 스키마. 이름과 가격은 필수입니다."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=60))
    price = fields.Float(required=True, validate=validate.Range(min=0))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    duration = fields.Str(allow_none=True, validate=validate.Length(max=30))
    rating = fields.Float(validate=validate.Range(min=0, max=5))


class ServiceUpdateSchema(Schema):
    """PATCH /api/catalog/<service_id> (부분 업데이트)"""
    name = fields.Str(validate=validate.Length(min=1, max=60))
    price = fields.Float(validate=validate.Range(min=0))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    duration = fields.Str(allow_none=True, validate=validate.Length(max=30))
    rating = fields.Float(validate=validate.Range(min=0, max=5))


class ServiceResponseSchema(Schema):
    service_id = fields.Str(dump_only=True)
    name = fields.Str()
    description = fields.Str(allow_none=True)
    price = fields.Float()
    duration = fields.Str(allow_none=True)
    image_url = fields.Str(allow_none=True)
    rating = fields.Float()
