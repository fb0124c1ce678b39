from collections import OrderedDict

from flask import current_app
from sqlalchemy import func

from confreg import db
from confreg.models.event_team import EventTeam
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.services.errors import NotFoundError, ServiceError

REASON_OTHER_REGION = 'Cannot assign registrants from other regions'
REASON_ALREADY_ASSIGNED = 'Already assigned to a team'
REASON_NOT_FOUND = 'Registrant not found'


def get_team(team_id):
    team = db.session.get(EventTeam, team_id)
    if not team:
        raise NotFoundError('Team not found')
    return team


def _member_counts():
    rows = db.session.query(
        Registrant.event_team_id, func.count(Registrant.id)
    ).filter(Registrant.event_team_id.isnot(None)).group_by(
        Registrant.event_team_id).all()
    return {team_id: count for team_id, count in rows}


def list_teams(event_config_id=None):
    query = EventTeam.query
    if event_config_id:
        query = query.filter_by(event_config_id=event_config_id)
    counts = _member_counts()
    return [t.to_dict(member_count=counts.get(t.id, 0))
            for t in query.order_by(EventTeam.name).all()]


def create_team(actor, data):
    team = EventTeam(**data)
    db.session.add(team)
    db.session.commit()
    current_app.logger.info(f"Team {team.name} created by {actor.email}")
    return team


def available_slots(team):
    """Free places in a team, None when the team has no capacity limit."""
    if team.capacity is None:
        return None
    return team.capacity - team.member_count()


def list_unassigned(actor):
    query = Registrant.query.join(
        Registration, Registration.id == Registrant.registration_id
    ).filter(Registrant.event_team_id.is_(None),
             Registration.status.in_(('confirmed', 'temp_confirmed', 'checked_in')))
    registrants = query.order_by(Registrant.full_name).all()
    return [r for r in registrants if _in_scope(actor, r)]


def _in_scope(actor, registrant):
    """Regional admins may only touch registrants of their own region."""
    if actor.role != 'regional_admin' or not actor.region:
        return True
    owner = registrant.registration.user
    return owner is not None and owner.region == actor.region


def _missing_group_members(requested):
    """Unassigned registrants left out of the request, per registration."""
    groups = OrderedDict()
    for registrant in requested.values():
        groups.setdefault(registrant.registration_id, set()).add(registrant.id)

    missing = []
    for registration_id, ids in groups.items():
        unassigned = Registrant.query.filter_by(
            registration_id=registration_id, event_team_id=None
        ).order_by(Registrant.created_at).all()
        missing.extend(r for r in unassigned if r.id not in ids)
    return missing


def bulk_assign(actor, registrant_ids, team_id):
    """Assign a batch of registrants to a team.

    Registrants of one registration move together: the batch is rejected
    before any write when it leaves one of them out or exceeds the team's
    free capacity. Past those checks, each registrant succeeds or fails on
    its own and the outcome is reported.
    """
    team = get_team(team_id)
    registrant_ids = list(OrderedDict.fromkeys(registrant_ids))

    found = Registrant.query.filter(Registrant.id.in_(registrant_ids)).all()
    requested = OrderedDict((r.id, r) for r in found)

    missing = _missing_group_members(requested)
    if missing:
        names = ', '.join(r.full_name for r in missing)
        raise ServiceError(
            f'All unassigned registrants of a registration must be assigned together. '
            f'Missing: {names}',
            payload={'missing_registrants': [
                {'registrant_id': r.id, 'registrant_name': r.full_name} for r in missing
            ]})

    # Unknown, out-of-scope and already-assigned ids fail below and take no slot
    assignable = [r for r in requested.values()
                  if _in_scope(actor, r) and not r.event_team_id]
    free = available_slots(team)
    if free is not None and len(assignable) > free:
        raise ServiceError(
            f'Not enough capacity. Team has {free} available slots but trying '
            f'to assign {len(assignable)} people.')

    success, failed = [], []
    for registrant_id in registrant_ids:
        registrant = requested.get(registrant_id)
        if registrant is None:
            failed.append({'registrant_id': registrant_id,
                           'registrant_name': None,
                           'reason': REASON_NOT_FOUND})
            continue
        if not _in_scope(actor, registrant):
            failed.append({'registrant_id': registrant.id,
                           'registrant_name': registrant.full_name,
                           'reason': REASON_OTHER_REGION})
            continue
        if registrant.event_team_id:
            failed.append({'registrant_id': registrant.id,
                           'registrant_name': registrant.full_name,
                           'reason': REASON_ALREADY_ASSIGNED})
            continue
        registrant.event_team_id = team.id
        success.append(registrant.id)

    db.session.commit()
    current_app.logger.info(
        f"Bulk assign to team {team.name} by {actor.email}: "
        f"{len(success)} assigned, {len(failed)} failed")

    return {
        'success': success,
        'failed': failed,
        'summary': {
            'total': len(registrant_ids),
            'successful': len(success),
            'failed': len(failed),
            'team_name': team.name,
        },
    }


def assign_registrant(actor, registrant_id, team_id):
    registrant = db.session.get(Registrant, registrant_id)
    if not registrant:
        raise NotFoundError('Registrant not found')
    if not _in_scope(actor, registrant):
        raise ServiceError(REASON_OTHER_REGION, status_code=403)
    if registrant.event_team_id:
        raise ServiceError('Registrant is already assigned to a team')

    team = get_team(team_id)
    if team.capacity is not None:
        current = team.member_count()
        if current >= team.capacity:
            raise ServiceError(f'Team is at full capacity ({current}/{team.capacity})')

    registrant.event_team_id = team.id
    db.session.commit()
    current_app.logger.info(
        f"Registrant {registrant.id} assigned to team {team.name} by {actor.email}")
    return registrant


def remove_from_team(actor, registrant_id):
    registrant = db.session.get(Registrant, registrant_id)
    if not registrant:
        raise NotFoundError('Registrant not found')
    if not _in_scope(actor, registrant):
        raise ServiceError(REASON_OTHER_REGION, status_code=403)
    if not registrant.event_team_id:
        raise ServiceError('Registrant is not assigned to a team')

    registrant.event_team_id = None
    db.session.commit()
    current_app.logger.info(
        f"Registrant {registrant.id} removed from team by {actor.email}")
    return registrant
