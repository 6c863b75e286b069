# petgroom/api/settings/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from petgroom.models.admin_setting import SettingCategory

HHMM = validate.Regexp(r'^([01]\d|2[0-3]):[0-5]\d$', error="시간은 'HH:MM' 형식이어야 합니다.")


class NotificationSettingsSchema(Schema):
    """PUT /api/admin/settings/notifications"""
    enabled = fields.Bool(required=True)
    new_appointment = fields.Bool(required=True)
    cancel = fields.Bool(required=True)
    reminder = fields.Bool(required=True)


class DailyHoursSchema(Schema):
    open = fields.Str(required=True, validate=HHMM)
    close = fields.Str(required=True, validate=HHMM)
    enabled = fields.Bool(required=True)

    @validates_schema
    def validate_range(self, data, **kwargs):
        # 'HH:MM' 형식은 문자열 비교가 시간 비교와 같습니다.
        if data['enabled'] and data['open'] >= data['close']:
            raise ValidationError("마감 시간은 오픈 시간보다 늦어야 합니다.", field_name='close')


class BusinessHoursSchema(Schema):
    """PUT /api/admin/settings/business_hours (요일별 영업시간)"""
    mon = fields.Nested(DailyHoursSchema, required=True)
    tue = fields.Nested(DailyHoursSchema, required=True)
    wed = fields.Nested(DailyHoursSchema, required=True)
    thu = fields.Nested(DailyHoursSchema, required=True)
    fri = fields.Nested(DailyHoursSchema, required=True)
    sat = fields.Nested(DailyHoursSchema, required=True)
    sun = fields.Nested(DailyHoursSchema, required=True)


class PaymentMethodsSchema(Schema):
    """PUT /api/admin/settings/payment_methods"""
    pix = fields.Bool(required=True)
    cash = fields.Bool(required=True)
    credit_card = fields.Bool(required=True)
    debit_card = fields.Bool(required=True)


SCHEMA_BY_CATEGORY = {
    SettingCategory.NOTIFICATIONS: NotificationSettingsSchema,
    SettingCategory.BUSINESS_HOURS: BusinessHoursSchema,
    SettingCategory.PAYMENT_METHODS: PaymentMethodsSchema,
}
