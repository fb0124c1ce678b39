import uuid
from confreg import db


class Ticket(db.Model):
    __tablename__ = 'tickets'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    registrant_id = db.Column(db.String(36), db.ForeignKey(
        'registrants.id'), nullable=False, unique=True)
    # Signed token encoded in the badge QR code
    qr_code = db.Column(db.String(255), nullable=False, unique=True)
    generated_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<Ticket Registrant:{self.registrant_id}>'

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'registrant_id': self.registrant_id,
            'qr_code': self.qr_code,
            'generated_at': safe_iso(self.generated_at)
        }
