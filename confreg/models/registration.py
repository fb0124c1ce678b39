import uuid
from confreg import db
from sqlalchemy.orm import validates

REGISTRATION_STATUSES = (
    'pending',           # waiting for payment
    'report_paid',       # participant uploaded a payment receipt
    'confirm_paid',      # cashier verified the transfer
    'payment_rejected',  # cashier rejected the receipt
    'donation',          # participant donated the fee instead of a refund
    'cancel_pending',    # refund request awaiting review
    'cancel_accepted',
    'cancel_rejected',
    'cancel_processed',  # refund paid out
    'cancelled',
    'be_cancelled',
    'confirmed',         # tickets can be issued
    'temp_confirmed',    # admin-created, pay later
    'checked_in',
    'checked_out',
)


class Registration(db.Model):
    __tablename__ = 'registrations'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey(
        'users.id'), nullable=False)
    event_config_id = db.Column(db.String(36), db.ForeignKey(
        'event_configs.id'), nullable=True)
    invoice_code = db.Column(db.String(40), unique=True, nullable=False)
    status = db.Column(db.Enum(*REGISTRATION_STATUSES, name='registration_status'),
                       default='pending', nullable=False)
    # Smallest currency unit (yen)
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    participant_count = db.Column(db.Integer, nullable=False, default=0)
    notes = db.Column(db.Text)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    registrants = db.relationship(
        'Registrant', backref='registration', lazy=True,
        cascade='all, delete-orphan', order_by='Registrant.created_at')
    receipts = db.relationship(
        'Receipt', backref='registration', lazy=True, cascade='all, delete-orphan')
    cancel_requests = db.relationship(
        'CancelRequest', backref='registration', lazy=True)

    @validates('status')
    def validate_status(self, key, value):
        if value not in REGISTRATION_STATUSES:
            raise ValueError(f'Unknown registration status: {value}')
        return value

    @validates('invoice_code')
    def validate_invoice_code(self, key, value):
        if self.invoice_code is not None and value != self.invoice_code:
            raise ValueError('invoice_code cannot be changed once assigned')
        return value

    def __repr__(self):
        return f'<Registration {self.invoice_code} {self.status}>'

    def primary_registrant(self):
        for registrant in self.registrants:
            if registrant.is_primary:
                return registrant
        return None

    def has_issued_tickets(self):
        from confreg.models.ticket import Ticket
        from confreg.models.registrant import Registrant

        return db.session.query(Ticket.id).join(
            Registrant, Registrant.id == Ticket.registrant_id
        ).filter(Registrant.registration_id == self.id).first() is not None

    def to_dict(self, include_registrants=False):
        from confreg.utils.datetime_utils import safe_iso

        data = {
            'id': self.id,
            'user_id': self.user_id,
            'event_config_id': self.event_config_id,
            'invoice_code': self.invoice_code,
            'status': self.status,
            'total_amount': self.total_amount,
            'participant_count': self.participant_count,
            'notes': self.notes,
            'created_at': safe_iso(self.created_at),
            'updated_at': safe_iso(self.updated_at)
        }
        if include_registrants:
            data['registrants'] = [r.to_dict() for r in self.registrants]
        return data
