from flask import current_app

from confreg import db
from confreg.models.event_config import EventConfig
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.models.user import User
from confreg.services.errors import (
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)
from confreg.services.registration_lifecycle import (
    apply_transition,
    can_direct_cancel,
    can_edit_registration,
)
from confreg.utils.datetime_utils import ensure_utc, utcnow
from confreg.utils.invoice_utils import generate_unique_invoice_code

# Roles that may read or edit any registration
REGISTRATION_ADMIN_ROLES = ('super_admin', 'regional_admin', 'registration_manager')
REGISTRATION_LIST_ROLES = ('super_admin', 'regional_admin')

REGISTRANT_FIELDS = (
    'email', 'saint_name', 'full_name', 'gender', 'age_group', 'province',
    'diocese', 'address', 'phone', 'facebook_link', 'shirt_size',
    'event_role_id', 'second_day_only', 'notes',
)


def current_base_price():
    """Base price of the active event, or the configured default."""
    event = EventConfig.get_active()
    if event and event.base_price:
        return event, event.base_price
    return event, current_app.config.get('DEFAULT_BASE_PRICE', 6000)


def registrant_price(base_price, age_group, second_day_only=False):
    """Price for one person.

    Children under 12 pay half, or a quarter when they only attend the
    second day. Adults attending only the second day pay half.
    """
    if age_group == 'under_12':
        return base_price * (25 if second_day_only else 50) // 100
    if second_day_only:
        return base_price * 50 // 100
    return base_price


def calculate_total(base_price, registrants):
    return sum(
        registrant_price(base_price, r.get('age_group'), r.get('second_day_only', False))
        for r in registrants
    )


def normalize_primary(registrants):
    """Ensure exactly one entry is flagged primary; the first flagged one wins."""
    primary_index = next(
        (i for i, r in enumerate(registrants) if r.get('is_primary')), 0)
    for i, r in enumerate(registrants):
        r['is_primary'] = i == primary_index
    return registrants


def _build_registrant(data):
    registrant = Registrant()
    for field in REGISTRANT_FIELDS:
        if field in data:
            setattr(registrant, field, data[field])
    registrant.full_name = (data.get('full_name') or '').strip().upper()
    if data.get('saint_name'):
        registrant.saint_name = data['saint_name'].strip().upper()
    registrant.is_primary = bool(data.get('is_primary'))
    return registrant


def create_registration(owner, data, status='pending'):
    """Create a registration and all its registrants in one transaction."""
    registrants_data = normalize_primary(list(data.get('registrants') or []))
    if not registrants_data:
        raise ServiceError('At least one registrant is required')

    event, base_price = current_base_price()

    registration = Registration(
        user_id=owner.id,
        event_config_id=event.id if event else None,
        invoice_code=generate_unique_invoice_code(db.session, Registration),
        status=status,
        total_amount=calculate_total(base_price, registrants_data),
        participant_count=len(registrants_data),
        notes=data.get('notes'),
    )
    registration.registrants = [_build_registrant(r) for r in registrants_data]

    db.session.add(registration)
    db.session.commit()

    current_app.logger.info(
        f"Registration {registration.invoice_code} created for user {owner.id} "
        f"({registration.participant_count} registrants, status {status})")
    return registration


def create_admin_registration(actor, data):
    """Registration entered by staff on behalf of a user; payment comes later."""
    owner = actor
    user_id = data.get('user_id')
    if user_id:
        owner = db.session.get(User, user_id)
        if not owner:
            raise NotFoundError('User not found')
    registration = create_registration(owner, data, status='temp_confirmed')
    current_app.logger.info(
        f"Registration {registration.invoice_code} entered by {actor.email}")
    return registration


def is_registration_admin(user):
    return user.role in REGISTRATION_ADMIN_ROLES


def get_registration(registration_id):
    registration = db.session.get(Registration, registration_id)
    if not registration:
        raise NotFoundError('Registration not found')
    return registration


def get_registration_for(user, registration_id):
    """Load a registration visible to ``user`` (owner or registration admin)."""
    registration = get_registration(registration_id)
    if registration.user_id != user.id and not is_registration_admin(user):
        raise PermissionDeniedError('Forbidden')
    return registration


def list_user_registrations(user):
    return Registration.query.filter_by(user_id=user.id).order_by(
        Registration.created_at.desc()).all()


def list_registrations(user, status=None):
    """All registrations for super admins; own region only for regional admins."""
    if user.role not in REGISTRATION_LIST_ROLES:
        raise PermissionDeniedError('Forbidden')

    query = Registration.query
    if user.role == 'regional_admin':
        query = query.join(User, User.id == Registration.user_id).filter(
            User.region == user.region)
    if status:
        query = query.filter(Registration.status == status)
    return query.order_by(Registration.created_at.desc()).all()


def update_registration(user, registration_id, data):
    """Replace the registrants of an editable registration and reprice it."""
    registration = get_registration_for(user, registration_id)

    if not can_edit_registration(registration.status, registration.has_issued_tickets()):
        raise ServiceError(
            'Cannot modify registration - tickets have been exported or registration is confirmed')

    registrants_data = normalize_primary(list(data.get('registrants') or []))
    if not registrants_data:
        raise ServiceError('At least one registrant is required')

    _, base_price = current_base_price()

    # delete-orphan cascade removes the previous rows
    registration.registrants = [_build_registrant(r) for r in registrants_data]
    registration.total_amount = calculate_total(base_price, registrants_data)
    registration.participant_count = len(registrants_data)
    if 'notes' in data:
        registration.notes = data.get('notes')

    db.session.commit()
    current_app.logger.info(
        f"Registration {registration.invoice_code} updated by {user.email}")
    return registration


def cancel_registration(user, registration_id):
    """Owner or admin cancellation before payment is settled."""
    registration = get_registration(registration_id)
    is_owner = registration.user_id == user.id
    if not is_owner and user.role not in REGISTRATION_LIST_ROLES:
        raise PermissionDeniedError('Forbidden')

    has_tickets = registration.has_issued_tickets()
    if not can_direct_cancel(registration.status, has_tickets):
        if has_tickets:
            raise ServiceError('Cannot cancel registration - tickets have been generated')
        raise ServiceError('Cannot cancel registration - invalid status')

    event = EventConfig.get_active()
    if event and event.cancellation_deadline:
        if utcnow() > ensure_utc(event.cancellation_deadline):
            raise ServiceError('Cancellation deadline has passed')

    apply_transition(registration, 'direct_cancel', user.role, owner=is_owner)
    db.session.commit()

    current_app.logger.info(
        f"Registration {registration.invoice_code} cancelled by {user.email}")
    return registration
