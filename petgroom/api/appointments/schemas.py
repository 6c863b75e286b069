# petgroom/api/appointments/schemas.py
from marshmallow import Schema, fields, validate

from petgroom.api.catalog.schemas import ServiceResponseSchema
from petgroom.api.pets.schemas import PetResponseSchema
from petgroom.api.profiles.schemas import ProfileResponseSchema
from .services import LIST_VIEWS, VIEW_ALL

HHMM_REGEX = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentCreateSchema(Schema):
    """POST /api/appointments/ 예약 생성 요청 스키마. 상태는 서버에서 PENDING으로 지정합니다."""
    pet_id = fields.Str(required=True, validate=validate.Length(min=1))
    service_id = fields.Str(required=True, validate=validate.Length(min=1))
    scheduled_date = fields.Date(required=True)
    scheduled_time = fields.Str(required=True, validate=validate.Regexp(HHMM_REGEX, error="시간은 HH:MM 형식이어야 합니다."))
    notes = fields.Str(allow_none=True, validate=validate.Length(max=500))


class AppointmentUpdateSchema(Schema):
    """PATCH /api/appointments/<appointment_id> (부분 업데이트, status 제외)"""
    pet_id = fields.Str(validate=validate.Length(min=1))
    service_id = fields.Str(validate=validate.Length(min=1))
    scheduled_date = fields.Date()
    scheduled_time = fields.Str(validate=validate.Regexp(HHMM_REGEX, error="시간은 HH:MM 형식이어야 합니다."))
    notes = fields.Str(allow_none=True, validate=validate.Length(max=500))


class AppointmentResponseSchema(Schema):
    appointment_id = fields.Str(dump_only=True)
    user_id = fields.Str(dump_only=True)
    pet_id = fields.Str()
    service_id = fields.Str()
    scheduled_date = fields.Date()
    scheduled_time = fields.Str()
    status = fields.Function(lambda a: a.status.value)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    is_modifiable = fields.Bool(dump_only=True)


class AppointmentDetailSchema(Schema):
    """예약 + 반려동물/서비스/(관리자 화면) 소유자 프로필."""
    appointment = fields.Nested(AppointmentResponseSchema)
    pet = fields.Nested(PetResponseSchema, allow_none=True)
    service = fields.Nested(ServiceResponseSchema, allow_none=True)
    profile = fields.Nested(ProfileResponseSchema, allow_none=True)


class TimeSlotQuerySchema(Schema):
    date = fields.Date(required=True)


class AppointmentListQuerySchema(Schema):
    """GET /api/appointments/ 쿼리 파라미터"""
    view = fields.Str(load_default=VIEW_ALL, validate=validate.OneOf(LIST_VIEWS))
