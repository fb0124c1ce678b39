from flask import current_app

from confreg import db
from confreg.models.cancel_request import CancelRequest
from confreg.models.registration import Registration
from confreg.services.errors import ConflictError, NotFoundError, ServiceError
from confreg.services.registration_lifecycle import (
    CANCEL_REVIEW_ROLES,
    apply_transition,
    can_request_cancellation,
)
from confreg.services.transition_table import TransitionTable, transition
from confreg.utils.datetime_utils import utcnow

CANCEL_REQUEST_TRANSITIONS = TransitionTable('cancel request', [
    transition('pending', 'approved', CANCEL_REVIEW_ROLES),
    transition('pending', 'rejected', CANCEL_REVIEW_ROLES),
    transition('approved', 'processed', CANCEL_REVIEW_ROLES),
])

# Registration action applied alongside each cancel request decision
REGISTRATION_ACTIONS = {
    'approved': 'cancel_accept',
    'rejected': 'cancel_reject',
    'processed': 'cancel_process',
}


def submit_cancel_request(user, data):
    """Refund or donation request from the registration owner.

    Returns (registration, cancel_request); cancel_request is None for
    donations, which change the registration directly.
    """
    registration = Registration.query.filter_by(
        id=data['registration_id'], user_id=user.id).first()
    if not registration:
        # Same answer for someone else's registration
        raise NotFoundError('Registration not found')

    # Checked before the status guard: the pending request has already
    # moved the registration to cancel_pending
    pending = CancelRequest.query.filter_by(
        registration_id=registration.id, status='pending').first()
    if pending:
        raise ConflictError(
            'A cancel request is already pending for this registration')

    if not can_request_cancellation(registration.status):
        raise ServiceError('Registration cannot be cancelled in current status')

    reason = data['reason']
    request_type = data.get('request_type') or 'refund'

    if request_type == 'donation':
        apply_transition(registration, 'donate', user.role, owner=True)
        registration.notes = f'Donation: {reason}'
        db.session.commit()
        current_app.logger.info(
            f"Registration {registration.invoice_code} converted to donation by {user.email}")
        return registration, None

    cancel_request = CancelRequest(
        registration_id=registration.id,
        user_id=user.id,
        reason=reason,
        request_type='refund',
        bank_account_number=data.get('bank_account_number'),
        bank_name=data.get('bank_name'),
        account_holder_name=data.get('account_holder_name'),
        refund_amount=registration.total_amount,
        status='pending',
    )
    db.session.add(cancel_request)
    apply_transition(registration, 'request_refund', user.role, owner=True)
    registration.notes = f'Cancel request submitted: {reason}'
    # request row and status change commit together
    db.session.commit()

    current_app.logger.info(
        f"Refund requested for {registration.invoice_code} by {user.email}")
    return registration, cancel_request


def list_user_cancel_requests(user):
    return CancelRequest.query.filter_by(user_id=user.id).order_by(
        CancelRequest.created_at.desc()).all()


def list_cancel_requests(status=None):
    query = CancelRequest.query
    if status:
        query = query.filter_by(status=status)
    return query.order_by(CancelRequest.created_at.desc()).all()


def process_cancel_request(actor, request_id, action, admin_notes=None):
    """Review decision on a refund request, mirrored onto its registration."""
    cancel_request = db.session.get(CancelRequest, request_id)
    if not cancel_request:
        raise NotFoundError('Cancel request not found')

    if action not in REGISTRATION_ACTIONS:
        raise ServiceError(f'Invalid action: {action}')

    if cancel_request.status in ('processed', 'rejected'):
        raise ServiceError('Cancel request has already been processed')

    CANCEL_REQUEST_TRANSITIONS.check(cancel_request.status, action, actor.role)

    registration = cancel_request.registration
    apply_transition(registration, REGISTRATION_ACTIONS[action], actor.role)

    cancel_request.status = action
    cancel_request.processed_by = actor.id
    cancel_request.processed_at = utcnow()
    if admin_notes:
        cancel_request.admin_notes = admin_notes
    db.session.commit()

    current_app.logger.info(
        f"Cancel request {request_id} {action} by {actor.email}; "
        f"registration {registration.invoice_code} now {registration.status}")
    return cancel_request
