from marshmallow import fields, validates_schema, ValidationError
from confreg import ma


class CheckInSchema(ma.Schema):
    registrant_id = fields.Str(load_default=None, allow_none=True, data_key='registrantId')
    qr_code = fields.Str(load_default=None, allow_none=True, data_key='qrCode')

    @validates_schema
    def validate_identifier(self, data, **kwargs):
        if not data.get('registrant_id') and not data.get('qr_code'):
            raise ValidationError('Thiếu thông tin registrant ID', 'registrantId')


check_in_schema = CheckInSchema()
