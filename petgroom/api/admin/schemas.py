# petgroom/api/admin/schemas.py
from marshmallow import Schema, fields, validate

from petgroom.models.appointment import ADMIN_SETTABLE_STATUSES
from petgroom.api.appointments.projections import AGENDA_STATUS_FILTERS, STATUS_FILTER_ALL
from petgroom.api.appointments.schemas import AppointmentDetailSchema

SETTABLE_STATUS_VALUES = sorted(s.value for s in ADMIN_SETTABLE_STATUSES)


class AgendaQuerySchema(Schema):
    """GET /api/admin/agenda 쿼리 파라미터"""
    date = fields.Date(load_default=None)
    status = fields.Str(load_default=STATUS_FILTER_ALL, validate=validate.OneOf(AGENDA_STATUS_FILTERS))


class StatusChangeSchema(Schema):
    """PATCH /api/admin/appointments/<id>/status"""
    status = fields.Str(required=True, validate=validate.OneOf(SETTABLE_STATUS_VALUES))


class AgendaResponseSchema(Schema):
    items = fields.List(fields.Nested(AppointmentDetailSchema))
    pending_count = fields.Int()


class DailyStatsSchema(Schema):
    today_count = fields.Int()
    pending_count = fields.Int()
    today_revenue = fields.Float()


class DashboardResponseSchema(Schema):
    stats = fields.Nested(DailyStatsSchema)
    upcoming = fields.List(fields.Nested(AppointmentDetailSchema))


class TopServiceSchema(Schema):
    name = fields.Str()
    count = fields.Int()
    revenue = fields.Float()


class FinancialStatsSchema(Schema):
    current_month_revenue = fields.Float()
    last_month_revenue = fields.Float()
    current_month_appointments = fields.Int()
    completed_appointments = fields.Int()
    average_ticket = fields.Float()
    top_services = fields.List(fields.Nested(TopServiceSchema))
