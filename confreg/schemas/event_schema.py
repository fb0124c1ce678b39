from datetime import timezone
from marshmallow import fields, post_load, validate, validates_schema, ValidationError
from confreg import ma
from confreg.models.event_config import EventConfig
from confreg.models.event_role import EventRole
from confreg.utils.datetime_utils import ensure_utc


class EventConfigSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = EventConfig
        load_instance = False

    name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(load_default=None, allow_none=True)
    start_date = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=timezone.utc)
    end_date = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=timezone.utc)
    base_price = fields.Int(load_default=6000, validate=validate.Range(min=0))
    cancellation_deadline = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=timezone.utc)
    is_active = fields.Bool(load_default=False)
    total_slots = fields.Int(load_default=None, allow_none=True,
                             validate=validate.Range(min=0))

    id = fields.Str(dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)

    @validates_schema
    def validate_dates(self, data, **kwargs):
        start, end = data.get('start_date'), data.get('end_date')
        if start and end and end < start:
            raise ValidationError('end_date must not be before start_date', 'end_date')

    @post_load
    def to_utc(self, data, **kwargs):
        # stored as UTC; SQLite drops the offset
        for key in ('start_date', 'end_date', 'cancellation_deadline'):
            if data.get(key):
                data[key] = ensure_utc(data[key])
        return data


event_config_schema = EventConfigSchema()
event_configs_schema = EventConfigSchema(many=True)


class EventRoleSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = EventRole
        load_instance = False
        include_fk = True

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(load_default=None, allow_none=True)
    team_name = fields.Str(load_default=None, allow_none=True)
    event_config_id = fields.Str(load_default=None, allow_none=True)

    id = fields.Str(dump_only=True)
    created_at = fields.DateTime(dump_only=True)


event_role_schema = EventRoleSchema()
event_roles_schema = EventRoleSchema(many=True)
