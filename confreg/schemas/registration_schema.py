from marshmallow import fields, validate, validates_schema, ValidationError
from confreg import ma
from confreg.models.registrant import AGE_GROUPS, GENDERS, SHIRT_SIZES
from confreg.models.registration import REGISTRATION_STATUSES


class RegistrantInputSchema(ma.Schema):
    email = fields.Email(load_default=None, allow_none=True)
    saint_name = fields.Str(load_default=None, allow_none=True,
                            validate=validate.Length(max=100))
    full_name = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    gender = fields.Str(required=True, validate=validate.OneOf(GENDERS))
    age_group = fields.Str(required=True, validate=validate.OneOf(AGE_GROUPS))
    province = fields.Str(load_default=None, allow_none=True)
    diocese = fields.Str(load_default=None, allow_none=True)
    address = fields.Str(load_default=None, allow_none=True)
    phone = fields.Str(load_default=None, allow_none=True,
                       validate=validate.Length(max=30))
    facebook_link = fields.Str(load_default=None, allow_none=True)
    shirt_size = fields.Str(required=True, validate=validate.OneOf(SHIRT_SIZES))
    event_role_id = fields.Str(load_default=None, allow_none=True)
    is_primary = fields.Bool(load_default=False)
    second_day_only = fields.Bool(load_default=False)
    notes = fields.Str(load_default=None, allow_none=True)


class RegistrationInputSchema(ma.Schema):
    registrants = fields.List(fields.Nested(RegistrantInputSchema), required=True,
                              validate=validate.Length(min=1))
    notes = fields.Str(load_default=None, allow_none=True)

    @validates_schema
    def validate_full_names(self, data, **kwargs):
        for registrant in data.get('registrants') or []:
            if not (registrant.get('full_name') or '').strip():
                raise ValidationError('full_name cannot be blank', 'registrants')


registration_input_schema = RegistrationInputSchema()


class AdminRegistrationInputSchema(RegistrationInputSchema):
    # owner of the registration; defaults to the staff member entering it
    user_id = fields.Str(load_default=None, allow_none=True)


admin_registration_input_schema = AdminRegistrationInputSchema()


class RegistrationFilterSchema(ma.Schema):
    status = fields.Str(load_default=None, validate=validate.OneOf(REGISTRATION_STATUSES))


registration_filter_schema = RegistrationFilterSchema()


class PortraitSchema(ma.Schema):
    portrait_url = fields.Url(required=True)


portrait_schema = PortraitSchema()
