"""Registration status rules.

Every route that moves a registration between statuses goes through the
predicates and the transition table in this module.
"""
from collections import namedtuple

from flask import current_app

from confreg.services.transition_table import TransitionTable, transition

CANCELLABLE_STATUSES = ('pending', 'confirmed', 'report_paid', 'confirm_paid')
TICKET_STATUSES = ('confirmed', 'temp_confirmed', 'checked_in')
CHECK_IN_STATUSES = ('confirmed', 'temp_confirmed', 'checked_in')
DIRECT_CANCEL_STATUSES = ('pending', 'report_paid', 'confirm_paid', 'payment_rejected')
# Ignored by the primary registrant repair tool
INACTIVE_STATUSES = ('cancelled', 'be_cancelled', 'cancel_accepted')

CANCEL_REVIEW_ROLES = ('registration_manager', 'super_admin', 'cashier_role')
CASHIER_ROLES = ('cashier_role', 'super_admin')
PAYMENT_ADMIN_ROLES = ('super_admin', 'regional_admin')
MANAGER_ROLES = ('registration_manager', 'super_admin')
DEFAULT_CHECK_IN_ROLES = ('registration_manager', 'event_organizer', 'super_admin')

REGISTRATION_TRANSITIONS = TransitionTable('registration', [
    transition('pending', 'report_paid', action='report_payment', owner=True),
    transition('report_paid', 'confirm_paid', CASHIER_ROLES, action='cashier_confirm'),
    transition('report_paid', 'payment_rejected', CASHIER_ROLES, action='cashier_reject'),
    transition('report_paid', 'confirmed', PAYMENT_ADMIN_ROLES, action='admin_confirm'),
    transition('report_paid', 'payment_rejected', PAYMENT_ADMIN_ROLES, action='admin_reject'),
    transition('confirm_paid', 'confirmed', MANAGER_ROLES, action='manager_confirm'),
    transition(CANCELLABLE_STATUSES, 'cancel_pending', action='request_refund', owner=True),
    transition(CANCELLABLE_STATUSES, 'donation', action='donate', owner=True),
    transition('cancel_pending', 'cancel_accepted', CANCEL_REVIEW_ROLES, action='cancel_accept'),
    transition('cancel_pending', 'cancel_rejected', CANCEL_REVIEW_ROLES, action='cancel_reject'),
    transition('cancel_accepted', 'cancel_processed', CANCEL_REVIEW_ROLES, action='cancel_process'),
    transition(DIRECT_CANCEL_STATUSES, 'cancelled', PAYMENT_ADMIN_ROLES,
               action='direct_cancel', owner=True),
    transition(('confirmed', 'temp_confirmed'), 'checked_in', DEFAULT_CHECK_IN_ROLES,
               action='check_in'),
])


def can_request_cancellation(status):
    return status in CANCELLABLE_STATUSES


def can_edit_registration(status, has_issued_tickets):
    return status != 'confirmed' and not has_issued_tickets


def can_access_tickets(status):
    return status in TICKET_STATUSES


def can_direct_cancel(status, has_issued_tickets):
    return status in DIRECT_CANCEL_STATUSES and not has_issued_tickets


ALLOWED = 'allowed'
CONFLICT = 'conflict'
PRECONDITION = 'precondition'

CheckInDecision = namedtuple(
    'CheckInDecision', ['outcome', 'sync_registration_status'])


def evaluate_check_in(status, already_checked_in):
    """Decide a check-in attempt from the registration status and registrant flag.

    The status gate comes first: a registrant checked in earlier on a
    registration that is no longer confirmed gets the precondition failure.
    """
    if status not in CHECK_IN_STATUSES:
        return CheckInDecision(PRECONDITION, False)
    if already_checked_in:
        return CheckInDecision(CONFLICT, False)
    return CheckInDecision(ALLOWED, status != 'checked_in')


def check_in_roles():
    return tuple(current_app.config.get('CHECK_IN_ROLES', DEFAULT_CHECK_IN_ROLES))


def apply_transition(registration, action, actor_role, owner=False):
    """Move ``registration`` through ``action``; returns the previous status.

    Raises PermissionDeniedError or TransitionNotAllowed. Does not commit.
    """
    previous = registration.status
    target = REGISTRATION_TRANSITIONS.check_action(
        action, previous, actor_role, owner=owner)
    registration.status = target
    return previous
