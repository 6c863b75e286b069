# petgroom/api/auth/schemas.py
from marshmallow import Schema, fields, validate

from petgroom.core.screens import Screen


class SessionRequestSchema(Schema):
    """POST /api/auth/session 요청 스키마"""
    id_token = fields.Str(
        required=True,
        validate=validate.Length(min=1),
        metadata={"description": "Firebase Authentication 로그인 후 발급된 ID 토큰"}
    )


class LogoutRequestSchema(Schema):
    """로그아웃 요청의 유효성을 검사하는 스키마"""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)


class NavigationRequestSchema(Schema):
    """POST /api/auth/navigation 요청 스키마 (이동하려는 화면과 대상 ID)"""
    screen = fields.Str(required=True, validate=validate.OneOf([s.value for s in Screen]))
    payload = fields.Str(load_default=None, allow_none=True)
