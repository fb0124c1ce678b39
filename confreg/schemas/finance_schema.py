from marshmallow import fields, validate
from confreg import ma
from confreg.models.donation import DONATION_STATUSES
from confreg.models.expense_request import EXPENSE_REQUEST_TYPES, EXPENSE_STATUSES
from confreg.models.income_source import INCOME_CATEGORIES, INCOME_STATUSES


class ExpenseCreateSchema(ma.Schema):
    event_config_id = fields.Str(load_default=None, allow_none=True)
    request_type = fields.Str(load_default='reimbursement',
                              validate=validate.OneOf(EXPENSE_REQUEST_TYPES))
    purpose = fields.Str(required=True, validate=validate.Length(min=1))
    amount_requested = fields.Int(required=True, validate=validate.Range(min=1))
    bank_account_name = fields.Str(required=True, validate=validate.Length(min=1))
    bank_name = fields.Str(required=True, validate=validate.Length(min=1))
    bank_branch = fields.Str(load_default=None, allow_none=True)
    account_number = fields.Str(required=True, validate=validate.Length(min=1))
    notes = fields.Str(load_default=None, allow_none=True)


class ExpenseUpdateSchema(ma.Schema):
    request_type = fields.Str(validate=validate.OneOf(EXPENSE_REQUEST_TYPES))
    purpose = fields.Str(validate=validate.Length(min=1))
    amount_requested = fields.Int(validate=validate.Range(min=1))
    amount_approved = fields.Int(validate=validate.Range(min=0))
    bank_account_name = fields.Str(validate=validate.Length(min=1))
    bank_name = fields.Str(validate=validate.Length(min=1))
    bank_branch = fields.Str(allow_none=True)
    account_number = fields.Str(validate=validate.Length(min=1))
    transfer_fee = fields.Int(validate=validate.Range(min=0))
    notes = fields.Str(allow_none=True)
    status = fields.Str(validate=validate.OneOf(EXPENSE_STATUSES))


class DonationCreateSchema(ma.Schema):
    event_config_id = fields.Str(load_default=None, allow_none=True)
    donor_name = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    contact = fields.Str(load_default=None, allow_none=True)
    amount = fields.Int(required=True, validate=validate.Range(min=1))
    public_identity = fields.Bool(load_default=False)
    note = fields.Str(load_default=None, allow_none=True)
    status = fields.Str(load_default='pledged', validate=validate.OneOf(DONATION_STATUSES))


class DonationUpdateSchema(ma.Schema):
    donor_name = fields.Str(validate=validate.Length(min=1, max=150))
    contact = fields.Str(allow_none=True)
    amount = fields.Int(validate=validate.Range(min=1))
    public_identity = fields.Bool()
    note = fields.Str(allow_none=True)
    status = fields.Str(validate=validate.OneOf(DONATION_STATUSES))


class IncomeSourceCreateSchema(ma.Schema):
    event_config_id = fields.Str(load_default=None, allow_none=True)
    category = fields.Str(required=True, validate=validate.OneOf(INCOME_CATEGORIES))
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(load_default=None, allow_none=True)
    amount = fields.Int(load_default=0, validate=validate.Range(min=0))
    expected_amount = fields.Int(load_default=None, allow_none=True,
                                 validate=validate.Range(min=0))
    status = fields.Str(load_default='pending', validate=validate.OneOf(INCOME_STATUSES))
    contact_person = fields.Str(load_default=None, allow_none=True)
    contact_info = fields.Str(load_default=None, allow_none=True)
    due_date = fields.Date(load_default=None, allow_none=True)
    received_date = fields.Date(load_default=None, allow_none=True)
    notes = fields.Str(load_default=None, allow_none=True)


class IncomeSourceUpdateSchema(ma.Schema):
    category = fields.Str(validate=validate.OneOf(INCOME_CATEGORIES))
    title = fields.Str(validate=validate.Length(min=1, max=200))
    description = fields.Str(allow_none=True)
    amount = fields.Int(validate=validate.Range(min=0))
    expected_amount = fields.Int(allow_none=True, validate=validate.Range(min=0))
    status = fields.Str(validate=validate.OneOf(INCOME_STATUSES))
    contact_person = fields.Str(allow_none=True)
    contact_info = fields.Str(allow_none=True)
    due_date = fields.Date(allow_none=True)
    received_date = fields.Date(allow_none=True)
    notes = fields.Str(allow_none=True)


class FinanceFilterSchema(ma.Schema):
    status = fields.Str(load_default=None)
    event_config_id = fields.Str(load_default=None)
    category = fields.Str(load_default=None)
    search = fields.Str(load_default=None)
    limit = fields.Int(load_default=20, validate=validate.Range(min=1, max=100))
    page = fields.Int(load_default=1, validate=validate.Range(min=1))


expense_create_schema = ExpenseCreateSchema()
expense_update_schema = ExpenseUpdateSchema()
donation_create_schema = DonationCreateSchema()
donation_update_schema = DonationUpdateSchema()
income_source_create_schema = IncomeSourceCreateSchema()
income_source_update_schema = IncomeSourceUpdateSchema()
finance_filter_schema = FinanceFilterSchema()
