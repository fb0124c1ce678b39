from flask import current_app

from confreg import db
from confreg.models.receipt import Receipt
from confreg.models.registration import Registration
from confreg.services import audit_service
from confreg.services.errors import NotFoundError, ServiceError
from confreg.services.registration_lifecycle import apply_transition
from confreg.services.registration_service import get_registration
from confreg.services.ticket_service import issue_tickets

ADMIN_REVIEW_ACTIONS = {
    'confirm_paid': 'admin_confirm',
    'payment_rejected': 'admin_reject',
}


def report_payment(user, invoice_code, receipt_url, amount=None, notes=None):
    """Owner reports a bank transfer by attaching an uploaded receipt."""
    registration = Registration.query.filter_by(
        invoice_code=invoice_code, user_id=user.id).first()
    if not registration:
        raise NotFoundError('Registration not found')

    apply_transition(registration, 'report_payment', user.role, owner=True)

    receipt = Receipt(
        registration_id=registration.id,
        file_path=receipt_url,
        file_name=receipt_url.rstrip('/').split('/')[-1] or 'receipt.jpg',
        amount=amount,
    )
    db.session.add(receipt)
    if notes:
        registration.notes = notes
    db.session.commit()

    current_app.logger.info(
        f"Payment reported for {registration.invoice_code} by {user.email}")
    return registration, receipt


def _review(actor, registration_id, action, admin_notes=None, with_tickets=False):
    registration = get_registration(registration_id)
    previous = apply_transition(registration, action, actor.role)

    if admin_notes:
        registration.notes = admin_notes
    tickets = issue_tickets(registration) if with_tickets else []
    db.session.commit()

    current_app.logger.info(
        f"Registration {registration.invoice_code} {previous} -> {registration.status} "
        f"by {actor.email}")
    audit_service.record_event(
        action,
        user_id=actor.id,
        target_id=registration.id,
        target_type='registration',
        details={
            'from_status': previous,
            'to_status': registration.status,
            'admin_notes': admin_notes,
            'tickets_issued': len(tickets),
        },
    )
    return registration


def cashier_confirm(actor, registration_id, admin_notes=None):
    return _review(actor, registration_id, 'cashier_confirm', admin_notes)


def cashier_reject(actor, registration_id, admin_notes):
    if not admin_notes or not admin_notes.strip():
        raise ServiceError('A rejection reason is required')
    return _review(actor, registration_id, 'cashier_reject', admin_notes)


def admin_review(actor, registration_id, status, admin_notes=None):
    """Admin shortcut: a verified receipt confirms the registration and issues tickets."""
    action = ADMIN_REVIEW_ACTIONS.get(status)
    if action is None:
        raise ServiceError('Invalid status')
    return _review(actor, registration_id, action, admin_notes,
                   with_tickets=action == 'admin_confirm')


def manager_confirm(actor, registration_id, admin_notes=None):
    """Registration manager finalizes a cashier-verified payment."""
    return _review(actor, registration_id, 'manager_confirm', admin_notes,
                   with_tickets=True)
