"""Backfill tools for rows written before invariants were enforced on write."""
from flask import current_app
from sqlalchemy import select, update

from confreg import db
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.services.registration_lifecycle import INACTIVE_STATUSES
from confreg.utils.datetime_utils import utcnow

PLACEHOLDER_NAME = 'Please Update Name'
PLACEHOLDER_NOTES = 'Auto-created primary registrant - Please update all fields'

MISSING_REGISTRANTS = 'missing_registrants'
NO_PRIMARY = 'no_primary'
MULTIPLE_PRIMARY = 'multiple_primary'


def _classify(registration):
    registrants = registration.registrants
    if not registrants:
        return MISSING_REGISTRANTS
    primaries = sum(1 for r in registrants if r.is_primary)
    if primaries == 0:
        return NO_PRIMARY
    if primaries > 1:
        return MULTIPLE_PRIMARY
    return None


def find_broken_registrations():
    """Active registrations without exactly one primary registrant."""
    registrations = Registration.query.filter(
        Registration.status.notin_(INACTIVE_STATUSES)
    ).order_by(Registration.created_at).all()

    broken = []
    for registration in registrations:
        problem = _classify(registration)
        if problem:
            broken.append((registration, problem))
    return broken


def _placeholder_primary(registration):
    owner = registration.user
    return Registrant(
        registration_id=registration.id,
        email=owner.email if owner else None,
        full_name=(owner.full_name if owner and owner.full_name else PLACEHOLDER_NAME),
        gender='other',
        age_group='18_25',
        province=owner.province if owner else None,
        shirt_size='M',
        is_primary=True,
        facebook_link=owner.facebook_url if owner else None,
        notes=PLACEHOLDER_NOTES,
    )


def describe(registration, problem):
    owner = registration.user
    return {
        'id': registration.id,
        'invoice_code': registration.invoice_code,
        'status': registration.status,
        'problem': problem,
        'user': {'email': owner.email, 'full_name': owner.full_name} if owner else None,
    }


def fix_primary_registrants(actor):
    """Repair every broken registration in one transaction.

    Missing registrants get a placeholder primary built from the owner's
    profile; otherwise the earliest registrant becomes the only primary.
    """
    broken = find_broken_registrations()
    created = 0
    for registration, problem in broken:
        if problem == MISSING_REGISTRANTS:
            db.session.add(_placeholder_primary(registration))
            created += 1
            continue
        earliest = registration.registrants[0]
        for registrant in registration.registrants:
            registrant.is_primary = registrant is earliest

    db.session.commit()
    if broken:
        current_app.logger.info(
            f"Primary registrant repair by {actor.email}: {len(broken)} registrations, "
            f"{created} placeholders created")
    return {
        'fixed': len(broken),
        'created': created,
        'registrations': [describe(r, p) for r, p in broken],
    }


def sync_checkin_status(actor):
    """Set checked_in on registrations with at least one checked-in registrant."""
    checked_in_ids = select(Registrant.registration_id).where(
        Registrant.is_checked_in.is_(True))
    result = db.session.execute(
        update(Registration)
        .where(Registration.status.in_(('confirmed', 'temp_confirmed')),
               Registration.id.in_(checked_in_ids))
        .values(status='checked_in', updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    current_app.logger.info(
        f"Check-in status sync by {actor.email}: {result.rowcount} registrations updated")
    return result.rowcount
