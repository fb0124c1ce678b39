import uuid
from confreg import db


class EventConfig(db.Model):
    __tablename__ = 'event_configs'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    start_date = db.Column(db.DateTime(timezone=True))
    end_date = db.Column(db.DateTime(timezone=True))
    base_price = db.Column(db.Integer, nullable=False, default=6000)
    cancellation_deadline = db.Column(db.DateTime(timezone=True))
    is_active = db.Column(db.Boolean, default=False, nullable=False)
    total_slots = db.Column(db.Integer)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    teams = db.relationship('EventTeam', backref='event_config', lazy=True)
    roles = db.relationship('EventRole', backref='event_config', lazy=True)

    def __repr__(self):
        return f'<EventConfig {self.name}>'

    @classmethod
    def get_active(cls):
        """The single active event, or None."""
        return cls.query.filter_by(is_active=True).order_by(cls.created_at.desc()).first()

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'start_date': safe_iso(self.start_date),
            'end_date': safe_iso(self.end_date),
            'base_price': self.base_price,
            'cancellation_deadline': safe_iso(self.cancellation_deadline),
            'is_active': self.is_active,
            'total_slots': self.total_slots,
            'created_at': safe_iso(self.created_at),
            'updated_at': safe_iso(self.updated_at)
        }
