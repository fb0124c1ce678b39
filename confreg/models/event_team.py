import uuid
from confreg import db


class EventTeam(db.Model):
    __tablename__ = 'event_teams'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    event_config_id = db.Column(db.String(36), db.ForeignKey(
        'event_configs.id'), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    # None means unlimited
    capacity = db.Column(db.Integer, nullable=True)
    leader_id = db.Column(db.String(36), db.ForeignKey('users.id'))
    sub_leader_id = db.Column(db.String(36), db.ForeignKey('users.id'))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    members = db.relationship('Registrant', backref='event_team', lazy=True)

    def __repr__(self):
        return f'<EventTeam {self.name}>'

    def member_count(self):
        from confreg.models.registrant import Registrant

        return Registrant.query.filter_by(event_team_id=self.id).count()

    def to_dict(self, member_count=None):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'event_config_id': self.event_config_id,
            'name': self.name,
            'description': self.description,
            'capacity': self.capacity,
            'leader_id': self.leader_id,
            'sub_leader_id': self.sub_leader_id,
            'member_count': member_count if member_count is not None else self.member_count(),
            'created_at': safe_iso(self.created_at),
            'updated_at': safe_iso(self.updated_at)
        }
