"""Expense requests, donations and income sources.

The three ledgers share one workflow: role-gated create, list with in-memory
stats, field update plus optional status transition, and delete. Each is
described by a FinanceResource.
"""
import math

from flask import current_app

from confreg import db
from confreg.models.donation import Donation
from confreg.models.expense_request import ExpenseRequest
from confreg.models.income_source import IncomeSource
from confreg.services.errors import NotFoundError, PermissionDeniedError, ServiceError
from confreg.services.transition_table import TransitionTable, transition
from confreg.utils.datetime_utils import to_local, utcnow

EXPENSE_ADMIN_ROLES = ('super_admin', 'regional_admin')
EXPENSE_TRANSFER_ROLES = ('cashier_role', 'super_admin')
INCOME_ROLES = ('super_admin', 'cashier_role', 'event_organizer')

EXPENSE_TRANSITIONS = TransitionTable('expense request', [
    transition('submitted', 'approved', EXPENSE_ADMIN_ROLES),
    transition('submitted', 'rejected', EXPENSE_ADMIN_ROLES),
    transition(('approved', 'transferred'), 'closed', EXPENSE_ADMIN_ROLES),
    transition('approved', 'transferred', EXPENSE_TRANSFER_ROLES),
])

DONATION_TRANSITIONS = TransitionTable('donation', [
    transition('pledged', 'received', EXPENSE_ADMIN_ROLES),
])

INCOME_TRANSITIONS = TransitionTable('income source', [
    transition('pending', 'received', INCOME_ROLES),
    transition('pending', 'overdue', INCOME_ROLES),
    transition('overdue', 'received', INCOME_ROLES),
])


def _expense_stats(rows):
    return {
        'total_requests': len(rows),
        'pending_requests': sum(1 for r in rows if r.status == 'submitted'),
        'approved_requests': sum(1 for r in rows if r.status == 'approved'),
        'transferred_requests': sum(1 for r in rows if r.status == 'transferred'),
        'closed_requests': sum(1 for r in rows if r.status == 'closed'),
        'total_amount': sum(r.amount_requested or 0 for r in rows),
        'approved_amount': sum(r.amount_approved or 0 for r in rows),
    }


def _donation_stats(rows):
    received = [r for r in rows if r.status == 'received']
    return {
        'total_donations': len(rows),
        'pledged_donations': sum(1 for r in rows if r.status == 'pledged'),
        'received_donations': len(received),
        'total_amount': sum(r.amount or 0 for r in rows),
        'received_amount': sum(r.amount or 0 for r in received),
    }


def _income_stats(rows):
    return {
        'total_sources': len(rows),
        'pending_sources': sum(1 for r in rows if r.status == 'pending'),
        'received_sources': sum(1 for r in rows if r.status == 'received'),
        'overdue_sources': sum(1 for r in rows if r.status == 'overdue'),
        'total_amount': sum(r.amount or 0 for r in rows),
        'received_amount': sum(r.amount or 0 for r in rows if r.status == 'received'),
        'pending_amount': sum(
            (r.expected_amount or r.amount or 0) for r in rows if r.status == 'pending'),
    }


def _stamp_expense(entry, to_status, actor):
    if to_status == 'approved':
        entry.approved_by = actor.id
        entry.approved_at = utcnow()
        if entry.amount_approved is None:
            entry.amount_approved = entry.amount_requested
    elif to_status == 'transferred':
        entry.processed_by = actor.id
        entry.processed_at = utcnow()


def _stamp_donation(entry, to_status, actor):
    if to_status == 'received':
        entry.received_at = utcnow()


def _stamp_income(entry, to_status, actor):
    if to_status == 'received' and entry.received_date is None:
        entry.received_date = to_local(utcnow()).date()


class FinanceResource:
    def __init__(self, name, model, transitions, owner_field, create_roles,
                 list_roles, update_roles, delete_roles, updatable_fields,
                 stats, stamp, deletable_statuses=None, search_fields=()):
        self.name = name
        self.model = model
        self.transitions = transitions
        self.owner_field = owner_field
        self.create_roles = create_roles
        self.list_roles = list_roles
        self.update_roles = update_roles
        self.delete_roles = delete_roles
        self.updatable_fields = updatable_fields
        self.stats = stats
        self.stamp = stamp
        self.deletable_statuses = deletable_statuses
        self.search_fields = search_fields

    def initial_status(self):
        return self.model.__table__.c.status.default.arg


EXPENSES = FinanceResource(
    'expense request', ExpenseRequest, EXPENSE_TRANSITIONS,
    owner_field='user_id',
    create_roles=('super_admin', 'regional_admin', 'cashier_role', 'event_organizer'),
    list_roles=('super_admin', 'regional_admin', 'cashier_role'),
    update_roles=('super_admin', 'regional_admin', 'cashier_role'),
    delete_roles=EXPENSE_ADMIN_ROLES,
    updatable_fields=(
        'request_type', 'purpose', 'amount_requested', 'amount_approved',
        'bank_account_name', 'bank_name', 'bank_branch', 'account_number',
        'transfer_fee', 'notes',
    ),
    stats=_expense_stats,
    stamp=_stamp_expense,
    deletable_statuses=('submitted',),
    search_fields=('purpose', 'bank_account_name', 'account_number'),
)

DONATIONS = FinanceResource(
    'donation', Donation, DONATION_TRANSITIONS,
    owner_field='created_by',
    create_roles=('super_admin', 'regional_admin', 'cashier_role'),
    list_roles=('super_admin', 'regional_admin', 'cashier_role'),
    update_roles=EXPENSE_ADMIN_ROLES,
    delete_roles=EXPENSE_ADMIN_ROLES,
    updatable_fields=('donor_name', 'contact', 'amount', 'public_identity', 'note'),
    stats=_donation_stats,
    stamp=_stamp_donation,
    search_fields=('donor_name', 'contact'),
)

INCOME_SOURCES = FinanceResource(
    'income source', IncomeSource, INCOME_TRANSITIONS,
    owner_field='created_by',
    create_roles=INCOME_ROLES,
    list_roles=INCOME_ROLES,
    update_roles=INCOME_ROLES,
    delete_roles=('super_admin', 'cashier_role'),
    updatable_fields=(
        'category', 'title', 'description', 'amount', 'expected_amount',
        'contact_person', 'contact_info', 'due_date', 'received_date', 'notes',
    ),
    stats=_income_stats,
    stamp=_stamp_income,
    search_fields=('title', 'contact_person'),
)


def _require(roles, actor, what):
    if actor.role not in roles:
        raise PermissionDeniedError(f'Role {actor.role} cannot {what}')


def _get(resource, entry_id):
    entry = db.session.get(resource.model, entry_id)
    if not entry:
        raise NotFoundError(f'{resource.name.capitalize()} not found')
    return entry


def create_entry(resource, actor, data):
    _require(resource.create_roles, actor, f'create {resource.name}')

    entry = resource.model()
    for field, value in data.items():
        if field == 'status':
            continue
        setattr(entry, field, value)
    setattr(entry, resource.owner_field, actor.id)

    # Donations and income may be recorded directly in a later status
    requested = data.get('status')
    initial = resource.initial_status()
    entry.status = initial
    if requested and requested != initial and resource is not EXPENSES:
        resource.transitions.check(initial, requested, actor.role)
        entry.status = requested
        resource.stamp(entry, requested, actor)

    db.session.add(entry)
    db.session.commit()
    current_app.logger.info(
        f"{resource.name.capitalize()} {entry.id} created by {actor.email}")
    return entry


def list_entries(resource, actor, filters=None):
    """Return (rows, stats, total_pages).

    Privileged roles see every row and the stats over the whole ledger;
    other creators only see their own rows.
    """
    filters = filters or {}
    model = resource.model

    query = model.query
    if actor.role in resource.list_roles:
        scope = model.query
    elif actor.role in resource.create_roles:
        owner_col = getattr(model, resource.owner_field)
        query = query.filter(owner_col == actor.id)
        scope = model.query.filter(owner_col == actor.id)
    else:
        raise PermissionDeniedError(f'Role {actor.role} cannot list {resource.name}')

    status = filters.get('status')
    if status and status != 'all':
        query = query.filter(model.status == status)
    if filters.get('event_config_id'):
        query = query.filter(model.event_config_id == filters['event_config_id'])
    if filters.get('category') and hasattr(model, 'category'):
        query = query.filter(model.category == filters['category'])
    search = (filters.get('search') or '').strip()
    if search and resource.search_fields:
        term = f'%{search}%'
        query = query.filter(db.or_(
            *[getattr(model, f).ilike(term) for f in resource.search_fields]))

    limit = filters.get('limit') or 20
    page = filters.get('page') or 1
    total = query.count()
    rows = query.order_by(model.created_at.desc()).offset(
        (page - 1) * limit).limit(limit).all()

    stats = resource.stats(scope.all())
    return rows, stats, math.ceil(total / limit) if total else 0


def update_entry(resource, actor, entry_id, data):
    """Patch fields and optionally move the status through the ledger's table."""
    _require(resource.update_roles, actor, f'update {resource.name}')
    entry = _get(resource, entry_id)

    to_status = data.get('status')
    if to_status and to_status != entry.status:
        resource.transitions.check(entry.status, to_status, actor.role)

    for field in resource.updatable_fields:
        if field in data:
            setattr(entry, field, data[field])

    if to_status and to_status != entry.status:
        previous = entry.status
        entry.status = to_status
        resource.stamp(entry, to_status, actor)
        current_app.logger.info(
            f"{resource.name.capitalize()} {entry.id} {previous} -> {to_status} "
            f"by {actor.email}")

    db.session.commit()
    return entry


def delete_entry(resource, actor, entry_id):
    _require(resource.delete_roles, actor, f'delete {resource.name}')
    entry = _get(resource, entry_id)

    if resource.deletable_statuses and entry.status not in resource.deletable_statuses:
        raise ServiceError(
            f'Only {", ".join(resource.deletable_statuses)} {resource.name}s can be deleted')

    db.session.delete(entry)
    db.session.commit()
    current_app.logger.info(
        f"{resource.name.capitalize()} {entry_id} deleted by {actor.email}")


def public_donations(event_config_id=None):
    """Received donations whose donors agreed to be listed."""
    query = Donation.query.filter_by(status='received', public_identity=True)
    if event_config_id:
        query = query.filter_by(event_config_id=event_config_id)
    donations = query.order_by(Donation.received_at.desc()).all()
    return donations, {
        'totalDonors': len(donations),
        'totalAmount': sum(d.amount or 0 for d in donations),
    }
