from marshmallow import fields, validate, validates_schema, ValidationError
from confreg import ma
from confreg.models.cancel_request import CANCEL_REQUEST_TYPES

# minimum lengths of the bank details a refund needs
BANK_FIELD_MIN_LENGTHS = {
    'bank_account_number': 5,
    'bank_name': 2,
    'account_holder_name': 2,
}


class CancelRequestInputSchema(ma.Schema):
    registration_id = fields.Str(required=True)
    reason = fields.Str(required=True, validate=validate.Length(min=10))
    request_type = fields.Str(load_default='refund',
                              validate=validate.OneOf(CANCEL_REQUEST_TYPES))
    bank_account_number = fields.Str(load_default=None, allow_none=True)
    bank_name = fields.Str(load_default=None, allow_none=True)
    account_holder_name = fields.Str(load_default=None, allow_none=True)

    @validates_schema
    def validate_bank_details(self, data, **kwargs):
        if data.get('request_type') != 'refund':
            return
        errors = {}
        for field, min_length in BANK_FIELD_MIN_LENGTHS.items():
            value = (data.get(field) or '').strip()
            if len(value) < min_length:
                errors[field] = [
                    f'Required for refunds, at least {min_length} characters.']
        if errors:
            raise ValidationError(errors)


cancel_request_input_schema = CancelRequestInputSchema()


class CancelRequestProcessSchema(ma.Schema):
    action = fields.Str(required=True, validate=validate.OneOf(
        ['approved', 'rejected', 'processed']))
    admin_notes = fields.Str(load_default=None, allow_none=True)


cancel_request_process_schema = CancelRequestProcessSchema()
