import uuid
from confreg import db

EXPENSE_REQUEST_TYPES = ('reimbursement', 'advance')
EXPENSE_STATUSES = ('submitted', 'approved', 'rejected', 'transferred', 'closed')


class ExpenseRequest(db.Model):
    __tablename__ = 'expense_requests'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    event_config_id = db.Column(db.String(36), db.ForeignKey(
        'event_configs.id'), nullable=True)
    user_id = db.Column(db.String(36), db.ForeignKey(
        'users.id'), nullable=False, index=True)
    request_type = db.Column(db.Enum(*EXPENSE_REQUEST_TYPES, name='expense_request_type'),
                             nullable=False)
    purpose = db.Column(db.Text, nullable=False)
    amount_requested = db.Column(db.Integer, nullable=False)
    amount_approved = db.Column(db.Integer)
    bank_account_name = db.Column(db.String(100))
    bank_name = db.Column(db.String(100))
    bank_branch = db.Column(db.String(100))
    account_number = db.Column(db.String(50))
    transfer_fee = db.Column(db.Integer, default=0)
    notes = db.Column(db.Text)
    status = db.Column(db.Enum(*EXPENSE_STATUSES, name='expense_status'),
                       default='submitted', nullable=False)
    approved_by = db.Column(db.String(36), db.ForeignKey('users.id'))
    approved_at = db.Column(db.DateTime(timezone=True))
    processed_by = db.Column(db.String(36), db.ForeignKey('users.id'))
    processed_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<ExpenseRequest {self.purpose[:20]} {self.status}>'

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'event_config_id': self.event_config_id,
            'user_id': self.user_id,
            'request_type': self.request_type,
            'purpose': self.purpose,
            'amount_requested': self.amount_requested,
            'amount_approved': self.amount_approved,
            'bank_account_name': self.bank_account_name,
            'bank_name': self.bank_name,
            'bank_branch': self.bank_branch,
            'account_number': self.account_number,
            'transfer_fee': self.transfer_fee,
            'notes': self.notes,
            'status': self.status,
            'approved_by': self.approved_by,
            'approved_at': safe_iso(self.approved_at),
            'processed_by': self.processed_by,
            'processed_at': safe_iso(self.processed_at),
            'created_at': safe_iso(self.created_at),
            'updated_at': safe_iso(self.updated_at)
        }
