import uuid
from confreg import db

CANCEL_REQUEST_TYPES = ('refund', 'donation')
CANCEL_REQUEST_STATUSES = ('pending', 'approved', 'rejected', 'processed')


class CancelRequest(db.Model):
    __tablename__ = 'cancel_requests'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    registration_id = db.Column(db.String(36), db.ForeignKey(
        'registrations.id'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey(
        'users.id'), nullable=False)
    reason = db.Column(db.Text, nullable=False)
    request_type = db.Column(db.Enum(*CANCEL_REQUEST_TYPES, name='cancel_request_type'),
                             default='refund', nullable=False)
    bank_account_number = db.Column(db.String(50))
    bank_name = db.Column(db.String(100))
    account_holder_name = db.Column(db.String(100))
    refund_amount = db.Column(db.Integer)
    status = db.Column(db.Enum(*CANCEL_REQUEST_STATUSES, name='cancel_request_status'),
                       default='pending', nullable=False)
    admin_notes = db.Column(db.Text)
    processed_by = db.Column(db.String(36), db.ForeignKey('users.id'))
    processed_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<CancelRequest Registration:{self.registration_id} {self.status}>'

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'registration_id': self.registration_id,
            'user_id': self.user_id,
            'reason': self.reason,
            'request_type': self.request_type,
            'bank_account_number': self.bank_account_number,
            'bank_name': self.bank_name,
            'account_holder_name': self.account_holder_name,
            'refund_amount': self.refund_amount,
            'status': self.status,
            'admin_notes': self.admin_notes,
            'processed_by': self.processed_by,
            'processed_at': safe_iso(self.processed_at),
            'created_at': safe_iso(self.created_at),
            'updated_at': safe_iso(self.updated_at)
        }
