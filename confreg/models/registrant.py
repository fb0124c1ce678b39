import uuid
from confreg import db

GENDERS = ('male', 'female', 'other')
AGE_GROUPS = ('under_12', '12_17', '18_25', '26_35', '36_50', 'over_50')
SHIRT_SIZES = (
    '1', '2', '3', '4', '5',
    'XS', 'S', 'M', 'L', 'XL', 'XXL', '3XL', '4XL',
    'M-XS', 'M-S', 'M-M', 'M-L', 'M-XL', 'M-XXL', 'M-3XL', 'M-4XL',
    'F-XS', 'F-S', 'F-M', 'F-L', 'F-XL', 'F-XXL',
)


class Registrant(db.Model):
    __tablename__ = 'registrants'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    registration_id = db.Column(db.String(36), db.ForeignKey(
        'registrations.id'), nullable=False, index=True)
    email = db.Column(db.String(120))
    saint_name = db.Column(db.String(100))
    full_name = db.Column(db.String(150), nullable=False)
    gender = db.Column(db.Enum(*GENDERS, name='gender_type'), nullable=False)
    age_group = db.Column(
        db.Enum(*AGE_GROUPS, name='age_group_type'), nullable=False)
    province = db.Column(db.String(100))
    diocese = db.Column(db.String(100))
    address = db.Column(db.String(255))
    phone = db.Column(db.String(30))
    facebook_link = db.Column(db.String(255))
    shirt_size = db.Column(db.String(10), nullable=False)
    is_primary = db.Column(db.Boolean, default=False, nullable=False)
    second_day_only = db.Column(db.Boolean, default=False, nullable=False)
    event_role_id = db.Column(db.String(36), db.ForeignKey('event_roles.id'))
    event_team_id = db.Column(db.String(36), db.ForeignKey(
        'event_teams.id'), index=True)
    portrait_url = db.Column(db.String(500))
    notes = db.Column(db.Text)
    is_checked_in = db.Column(db.Boolean, default=False, nullable=False)
    checked_in_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    event_role = db.relationship('EventRole', lazy=True)
    tickets = db.relationship('Ticket', backref='registrant', lazy=True,
                              cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Registrant {self.full_name}>'

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'registration_id': self.registration_id,
            'email': self.email,
            'saint_name': self.saint_name,
            'full_name': self.full_name,
            'gender': self.gender,
            'age_group': self.age_group,
            'province': self.province,
            'diocese': self.diocese,
            'shirt_size': self.shirt_size,
            'is_primary': self.is_primary,
            'second_day_only': self.second_day_only,
            'event_role_id': self.event_role_id,
            'event_team_id': self.event_team_id,
            'portrait_url': self.portrait_url,
            'is_checked_in': self.is_checked_in,
            'checked_in_at': safe_iso(self.checked_in_at),
        }

    def check_in_snapshot(self):
        """Fields returned to check-in kiosks."""
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'full_name': self.full_name,
            'saint_name': self.saint_name,
            'email': self.email,
            'diocese': self.diocese,
            'is_checked_in': self.is_checked_in,
            'checked_in_at': safe_iso(self.checked_in_at),
        }
