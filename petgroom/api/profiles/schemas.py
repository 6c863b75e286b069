# petgroom/api/profiles/schemas.py
from marshmallow import Schema, fields, validate


class ProfileUpdateSchema(Schema):
    """PUT /api/profiles/me 프로필 저장 스키마 (부분 업데이트 허용, role 제외)."""
    full_name = fields.Str(validate=validate.Length(min=1, max=80))
    phone = fields.Str(allow_none=True, validate=validate.Length(max=30))
    address = fields.Str(allow_none=True, validate=validate.Length(max=200))
    neighborhood = fields.Str(allow_none=True, validate=validate.Length(max=80))


class ProfileResponseSchema(Schema):
    user_id = fields.Str(dump_only=True)
    full_name = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True)
    role = fields.Function(lambda p: p.role.value)
    address = fields.Str(allow_none=True)
    neighborhood = fields.Str(allow_none=True)
    created_at = fields.DateTime()
