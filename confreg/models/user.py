# confreg/models/user.py
import uuid
from confreg import db
from werkzeug.security import generate_password_hash, check_password_hash

USER_ROLES = (
    "participant",
    "registration_manager",
    "event_organizer",
    "group_leader",
    "regional_admin",
    "super_admin",
    "cashier_role",
)

REGIONS = (
    "kanto",
    "kansai",
    "chubu",
    "kyushu",
    "chugoku",
    "shikoku",
    "tohoku",
    "hokkaido",
)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(120), unique=True, nullable=False)
    full_name = db.Column(db.String(120))
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(*USER_ROLES, name="user_role"), default="participant", nullable=False
    )
    region = db.Column(db.Enum(*REGIONS, name="region_type"), nullable=True)
    province = db.Column(db.String(100))
    facebook_url = db.Column(db.String(255))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
        nullable=False,
    )

    registrations = db.relationship("Registration", backref="user", lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.email}>"

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
            "region": self.region,
            "province": self.province,
            "is_active": self.is_active,
            "created_at": safe_iso(self.created_at),
            "updated_at": safe_iso(self.updated_at),
        }
