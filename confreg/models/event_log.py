import uuid
from confreg import db


class EventLog(db.Model):
    __tablename__ = 'event_logs'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    event_type = db.Column(db.String(50), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'))
    target_id = db.Column(db.String(36))
    target_type = db.Column(db.String(50))
    details = db.Column(db.JSON)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'event_type': self.event_type,
            'user_id': self.user_id,
            'target_id': self.target_id,
            'target_type': self.target_type,
            'details': self.details,
            'created_at': safe_iso(self.created_at)
        }
