import uuid
from confreg import db

DONATION_STATUSES = ('pledged', 'received')


class Donation(db.Model):
    __tablename__ = 'donations'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    event_config_id = db.Column(db.String(36), db.ForeignKey(
        'event_configs.id'), nullable=True)
    donor_name = db.Column(db.String(150), nullable=False)
    contact = db.Column(db.String(150))
    amount = db.Column(db.Integer, nullable=False)
    # Donor agreed to be listed publicly
    public_identity = db.Column(db.Boolean, default=False, nullable=False)
    note = db.Column(db.Text)
    status = db.Column(db.Enum(*DONATION_STATUSES, name='donation_status'),
                       default='pledged', nullable=False)
    received_at = db.Column(db.DateTime(timezone=True))
    created_by = db.Column(db.String(36), db.ForeignKey('users.id'))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<Donation {self.donor_name} {self.amount}>'

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'event_config_id': self.event_config_id,
            'donor_name': self.donor_name,
            'contact': self.contact,
            'amount': self.amount,
            'public_identity': self.public_identity,
            'note': self.note,
            'status': self.status,
            'received_at': safe_iso(self.received_at),
            'created_by': self.created_by,
            'created_at': safe_iso(self.created_at)
        }

    def to_public_dict(self):
        return {
            'id': self.id,
            'donor_name': self.donor_name,
            'amount': self.amount,
            'note': self.note
        }
