from collections import namedtuple

from flask import current_app
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from confreg import db
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.services import audit_service
from confreg.services.errors import (
    RegistrantNotFound,
    RegistrationNotFound,
    ServiceError,
)
from confreg.services.registration_lifecycle import (
    ALLOWED,
    CHECK_IN_STATUSES,
    CONFLICT,
    evaluate_check_in,
)
from confreg.utils.datetime_utils import (
    ensure_utc,
    format_local_datetime,
    parse_datetime_with_timezone,
    safe_iso,
    to_local,
    utcnow,
)
from confreg.utils.token_utils import verify_ticket_token

CheckInResult = namedtuple('CheckInResult', ['success', 'message', 'registrant'])

MSG_NOT_FOUND = 'Không tìm thấy thông tin người tham gia với mã QR này'
MSG_REGISTRATION_NOT_FOUND = 'Không tìm thấy thông tin đăng ký'
MSG_NOT_CONFIRMED = 'Đăng ký chưa được xác nhận thanh toán. Không thể check-in.'
MSG_ALREADY = '{name} đã check-in trước đó lúc {time}'
MSG_TAKEN = '{name} đã được check-in bởi người khác'
MSG_SUCCESS = 'Check-in thành công cho {name}!'

RECENT_CHECKINS_LIMIT = 10


def resolve_registrant_id(registrant_id=None, qr_code=None):
    """Registrant id from an explicit id or a signed ticket QR token."""
    if registrant_id:
        return str(registrant_id)
    if qr_code:
        resolved, err = verify_ticket_token(qr_code)
        if err:
            raise ServiceError('Mã QR không hợp lệ')
        return resolved
    raise ServiceError('Thiếu thông tin registrant ID')


def _load_registrant_snapshot(registrant_id):
    registrant = db.session.get(Registrant, registrant_id)
    if registrant is None:
        return None
    snapshot = registrant.check_in_snapshot()
    snapshot['registration_id'] = registrant.registration_id
    return snapshot


def _public(snapshot):
    return {k: v for k, v in snapshot.items() if k != 'registration_id'}


def _sync_registration_status(registration_id):
    """Best-effort projection of the registrant check-in onto the registration."""
    try:
        db.session.execute(
            update(Registration)
            .where(Registration.id == registration_id,
                   Registration.status != 'checked_in')
            .values(status='checked_in', updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(
            f"Registration {registration_id} status sync after check-in failed: {e}")


def check_in(registrant_id, actor):
    """Mark a registrant present at the venue.

    Hard errors: RegistrantNotFound, RegistrationNotFound. Every other
    outcome is a CheckInResult, successful or not.
    """
    snapshot = _load_registrant_snapshot(registrant_id)
    if snapshot is None:
        raise RegistrantNotFound(MSG_NOT_FOUND)

    status = db.session.execute(
        select(Registration.status).where(
            Registration.id == snapshot['registration_id'])
    ).scalar()
    if status is None:
        raise RegistrationNotFound(MSG_REGISTRATION_NOT_FOUND)

    decision = evaluate_check_in(status, snapshot['is_checked_in'])
    name = snapshot['full_name']

    if decision.outcome != ALLOWED:
        if decision.outcome == CONFLICT:
            message = MSG_ALREADY.format(
                name=name, time=_format_iso(snapshot['checked_in_at']))
        else:
            message = MSG_NOT_CONFIRMED
        return CheckInResult(False, message, _public(snapshot))

    now = utcnow()
    result = db.session.execute(
        update(Registrant)
        .where(Registrant.id == registrant_id, Registrant.is_checked_in.is_(False))
        .values(is_checked_in=True, checked_in_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    db.session.commit()

    if result.rowcount == 0:
        winner = db.session.execute(
            select(Registrant.full_name, Registrant.checked_in_at)
            .where(Registrant.id == registrant_id)
        ).first()
        winner_name = winner.full_name if winner and winner.full_name else name
        lost = _public(snapshot)
        lost.update({
            'full_name': winner_name,
            'is_checked_in': True,
            'checked_in_at': safe_iso(winner.checked_in_at) if winner else None,
        })
        current_app.logger.info(
            f"Check-in race lost for registrant {registrant_id}")
        return CheckInResult(False, MSG_TAKEN.format(name=winner_name), lost)

    if decision.sync_registration_status:
        _sync_registration_status(snapshot['registration_id'])

    audit_service.record_event(
        'check_in',
        user_id=actor.id,
        target_id=registrant_id,
        target_type='registrant',
        details={
            'registrant_name': name,
            'registrant_email': snapshot.get('email'),
            'checked_in_by': actor.email,
            'timestamp': safe_iso(now),
        },
    )

    current_app.logger.info(
        f"Registrant {registrant_id} checked in by {actor.email}")

    done = _public(snapshot)
    done.update({'is_checked_in': True, 'checked_in_at': safe_iso(now)})
    return CheckInResult(True, MSG_SUCCESS.format(name=name), done)


def _format_iso(value):
    if not value:
        return ''
    return format_local_datetime(parse_datetime_with_timezone(value))


def check_in_stats():
    """Counts over registrants whose registration can be checked in."""
    rows = db.session.query(Registrant).join(
        Registration, Registration.id == Registrant.registration_id
    ).filter(Registration.status.in_(CHECK_IN_STATUSES)).all()

    total_confirmed = len(rows)
    checked_in = [r for r in rows if r.is_checked_in]
    total_checked_in = len(checked_in)
    rate = f"{total_checked_in / total_confirmed * 100:.1f}" if total_confirmed else '0'

    today = to_local(utcnow()).date()
    today_checkins = [
        r for r in checked_in
        if r.checked_in_at and to_local(r.checked_in_at).date() == today
    ]
    today_checkins.sort(key=lambda r: ensure_utc(r.checked_in_at), reverse=True)

    return {
        'totalConfirmed': total_confirmed,
        'totalCheckedIn': total_checked_in,
        'checkInRate': rate,
        'todayCheckins': len(today_checkins),
        'recentCheckins': [
            r.check_in_snapshot() for r in today_checkins[:RECENT_CHECKINS_LIMIT]
        ],
    }
