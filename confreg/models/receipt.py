import uuid
from confreg import db


class Receipt(db.Model):
    __tablename__ = 'receipts'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    registration_id = db.Column(db.String(36), db.ForeignKey(
        'registrations.id'), nullable=False)
    file_path = db.Column(db.String(500), nullable=False)
    file_name = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Integer)
    uploaded_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'registration_id': self.registration_id,
            'file_path': self.file_path,
            'file_name': self.file_name,
            'amount': self.amount,
            'uploaded_at': safe_iso(self.uploaded_at)
        }
