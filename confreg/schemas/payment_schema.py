from marshmallow import fields, validate
from confreg import ma


class PaymentReportSchema(ma.Schema):
    invoice_code = fields.Str(required=True, data_key='invoiceCode')
    receipt_url = fields.Url(required=True, data_key='receiptUrl')
    amount = fields.Int(load_default=None, allow_none=True,
                        validate=validate.Range(min=1))
    notes = fields.Str(load_default=None, allow_none=True)


payment_report_schema = PaymentReportSchema()


class PaymentReviewSchema(ma.Schema):
    registration_id = fields.Str(required=True, data_key='registrationId')
    status = fields.Str(required=True, validate=validate.OneOf(
        ['confirm_paid', 'payment_rejected']))
    admin_notes = fields.Str(load_default=None, allow_none=True, data_key='adminNotes')


payment_review_schema = PaymentReviewSchema()


class PaymentDecisionSchema(ma.Schema):
    admin_notes = fields.Str(load_default=None, allow_none=True)


payment_decision_schema = PaymentDecisionSchema()


class PaymentRejectSchema(ma.Schema):
    admin_notes = fields.Str(required=True, validate=validate.Length(min=1))


payment_reject_schema = PaymentRejectSchema()
