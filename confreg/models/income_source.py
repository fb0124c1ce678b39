import uuid
from confreg import db

INCOME_CATEGORIES = ('ticket_sales', 'merchandise', 'food_beverage', 'other')
INCOME_STATUSES = ('pending', 'received', 'overdue')


class IncomeSource(db.Model):
    __tablename__ = 'income_sources'

    id = db.Column(db.String(36), primary_key=True,
                   default=lambda: str(uuid.uuid4()))
    event_config_id = db.Column(db.String(36), db.ForeignKey(
        'event_configs.id'), nullable=True)
    category = db.Column(db.Enum(*INCOME_CATEGORIES, name='income_category'),
                         nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    amount = db.Column(db.Integer, nullable=False, default=0)
    expected_amount = db.Column(db.Integer)
    status = db.Column(db.Enum(*INCOME_STATUSES, name='income_status'),
                       default='pending', nullable=False)
    contact_person = db.Column(db.String(150))
    contact_info = db.Column(db.String(150))
    due_date = db.Column(db.Date)
    received_date = db.Column(db.Date)
    notes = db.Column(db.Text)
    created_by = db.Column(db.String(36), db.ForeignKey('users.id'))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<IncomeSource {self.title} {self.status}>'

    def to_dict(self):
        from confreg.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'event_config_id': self.event_config_id,
            'category': self.category,
            'title': self.title,
            'description': self.description,
            'amount': self.amount,
            'expected_amount': self.expected_amount,
            'status': self.status,
            'contact_person': self.contact_person,
            'contact_info': self.contact_info,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'received_date': self.received_date.isoformat() if self.received_date else None,
            'notes': self.notes,
            'created_by': self.created_by,
            'created_at': safe_iso(self.created_at)
        }
