import uuid
from confreg import db


class EventRole(db.Model):
    __tablename__ = 'event_roles'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    event_config_id = db.Column(db.String(36), db.ForeignKey(
        'event_configs.id'), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    # Badge grouping label shown on tickets
    team_name = db.Column(db.String(100))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<EventRole {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'event_config_id': self.event_config_id,
            'name': self.name,
            'description': self.description,
            'team_name': self.team_name,
        }
