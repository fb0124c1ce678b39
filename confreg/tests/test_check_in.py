from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from confreg import db
from confreg.models.event_log import EventLog
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.services import checkin_service
from confreg.utils.token_utils import generate_ticket_token


@pytest.fixture
def staff_headers(make_user, auth_headers_for):
    staff = make_user('registration_manager', email='staff@test.com')
    return auth_headers_for(staff)


def _first_registrant(registration):
    return Registrant.query.filter_by(
        registration_id=registration.id, full_name='PERSON 1').one()


def test_check_in_success(client, sample_registration, staff_headers):
    registrant = _first_registrant(sample_registration)

    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=staff_headers)

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['message'] == 'Check-in thành công cho PERSON 1!'
    assert data['registrant']['id'] == registrant.id
    assert data['registrant']['is_checked_in'] is True
    assert data['registrant']['checked_in_at']
    assert 'registration_id' not in data['registrant']

    db.session.expire_all()
    stored = db.session.get(Registrant, registrant.id)
    assert stored.is_checked_in is True
    assert db.session.get(Registration, sample_registration.id).status == 'checked_in'


def test_repeat_check_in_is_soft_failure(client, sample_registration, staff_headers):
    registrant = _first_registrant(sample_registration)

    first = client.post('/api/check-in', json={'registrantId': registrant.id},
                        headers=staff_headers).get_json()
    second = client.post('/api/check-in', json={'registrantId': registrant.id},
                         headers=staff_headers)

    assert second.status_code == 200
    data = second.get_json()
    assert data['success'] is False
    assert data['message'].startswith('PERSON 1 đã check-in trước đó lúc ')
    assert data['registrant']['checked_in_at'] == first['registrant']['checked_in_at']


def test_lost_race_reports_winner_timestamp(app, client, sample_registration,
                                            staff_headers, monkeypatch):
    registrant = _first_registrant(sample_registration)
    stale = checkin_service._load_registrant_snapshot(registrant.id)

    winner = client.post('/api/check-in', json={'registrantId': registrant.id},
                         headers=staff_headers).get_json()
    assert winner['success'] is True

    # The second request read the registrant before the first one committed
    monkeypatch.setattr(checkin_service, '_load_registrant_snapshot',
                        lambda registrant_id: dict(stale))
    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=staff_headers)

    assert response.status_code == 200
    loser = response.get_json()
    assert loser['success'] is False
    assert loser['message'] == 'PERSON 1 đã được check-in bởi người khác'
    assert loser['registrant']['is_checked_in'] is True
    assert loser['registrant']['checked_in_at'] == winner['registrant']['checked_in_at']

    assert EventLog.query.filter_by(
        event_type='check_in', target_id=registrant.id).count() == 1


@pytest.mark.parametrize('status', ['pending', 'payment_rejected', 'cancelled'])
def test_unconfirmed_registration_cannot_check_in(client, make_user, make_registration,
                                                  staff_headers, status):
    owner = make_user()
    registration = make_registration(owner, status=status)
    registrant = _first_registrant(registration)

    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=staff_headers)

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is False
    assert data['message'] == checkin_service.MSG_NOT_CONFIRMED
    db.session.expire_all()
    assert db.session.get(Registrant, registrant.id).is_checked_in is False


@pytest.mark.parametrize('status', ['confirmed', 'temp_confirmed', 'checked_in'])
def test_confirmed_statuses_can_check_in(client, make_user, make_registration,
                                         staff_headers, status):
    owner = make_user()
    registration = make_registration(owner, status=status)
    registrant = _first_registrant(registration)

    data = client.post('/api/check-in', json={'registrantId': registrant.id},
                       headers=staff_headers).get_json()

    assert data['success'] is True
    db.session.expire_all()
    assert db.session.get(Registration, registration.id).status == 'checked_in'


def test_check_in_with_ticket_qr_code(client, sample_registration, staff_headers):
    registrant = _first_registrant(sample_registration)

    response = client.post('/api/check-in',
                           json={'qrCode': generate_ticket_token(registrant.id)},
                           headers=staff_headers)

    assert response.status_code == 200
    assert response.get_json()['registrant']['id'] == registrant.id


def test_tampered_qr_code_is_rejected(client, sample_registration, staff_headers):
    registrant = _first_registrant(sample_registration)
    token = generate_ticket_token(registrant.id) + 'x'

    response = client.post('/api/check-in', json={'qrCode': token}, headers=staff_headers)

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_missing_identifier(client, staff_headers):
    response = client.post('/api/check-in', json={}, headers=staff_headers)

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_unknown_registrant_is_not_found(client, staff_headers):
    response = client.post('/api/check-in', json={'registrantId': 'does-not-exist'},
                           headers=staff_headers)

    assert response.status_code == 404
    data = response.get_json()
    assert data['success'] is False
    assert data['message'] == checkin_service.MSG_NOT_FOUND


def test_participant_is_forbidden(client, sample_registration, make_user, auth_headers_for):
    participant = make_user('participant')
    registrant = _first_registrant(sample_registration)

    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=auth_headers_for(participant))

    assert response.status_code == 403
    assert response.get_json()['success'] is False


def test_check_in_requires_token(client):
    response = client.post('/api/check-in', json={'registrantId': 'x'})
    assert response.status_code == 401


def test_audit_failure_does_not_fail_check_in(client, sample_registration, staff_headers,
                                              monkeypatch, caplog):
    registrant = _first_registrant(sample_registration)
    real_commit = Session.commit

    def commit_failing_on_audit_rows(session):
        if any(isinstance(obj, EventLog) for obj in session.new):
            raise SQLAlchemyError('event_logs is read-only')
        return real_commit(session)

    monkeypatch.setattr(Session, 'commit', commit_failing_on_audit_rows)

    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=staff_headers)

    assert response.status_code == 200
    assert response.get_json()['success'] is True
    assert "Audit log 'check_in'" in caplog.text
    db.session.expire_all()
    assert db.session.get(Registrant, registrant.id).is_checked_in is True
    assert EventLog.query.count() == 0


def test_status_sync_failure_does_not_fail_check_in(client, sample_registration,
                                                    staff_headers, monkeypatch, caplog):
    registrant = _first_registrant(sample_registration)
    real_execute = Session.execute

    def execute_failing_on_registration_update(session, statement, *args, **kwargs):
        if getattr(statement, 'is_dml', False) and \
                getattr(statement, 'table', None) is Registration.__table__:
            raise OperationalError('UPDATE registrations', {}, Exception('database is locked'))
        return real_execute(session, statement, *args, **kwargs)

    monkeypatch.setattr(Session, 'execute', execute_failing_on_registration_update)

    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=staff_headers)

    assert response.status_code == 200
    assert response.get_json()['success'] is True
    assert 'status sync after check-in failed' in caplog.text
    db.session.expire_all()
    assert db.session.get(Registrant, registrant.id).is_checked_in is True
    assert db.session.get(Registration, sample_registration.id).status == 'confirmed'
    assert EventLog.query.filter_by(
        event_type='check_in', target_id=registrant.id).count() == 1


@pytest.mark.parametrize('status', ['cancelled', 'payment_rejected'])
def test_checked_in_registrant_of_unconfirmed_registration(client, make_user,
                                                           make_registration,
                                                           staff_headers, status):
    registration = make_registration(make_user(), status=status)
    registrant = _first_registrant(registration)
    registrant.is_checked_in = True
    registrant.checked_in_at = datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc)
    db.session.commit()

    response = client.post('/api/check-in', json={'registrantId': registrant.id},
                           headers=staff_headers)

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is False
    assert data['message'] == checkin_service.MSG_NOT_CONFIRMED


def test_check_in_stats(client, sample_registration, staff_headers):
    registrant = _first_registrant(sample_registration)
    client.post('/api/check-in', json={'registrantId': registrant.id}, headers=staff_headers)

    response = client.get('/api/check-in', headers=staff_headers)

    assert response.status_code == 200
    stats = response.get_json()
    assert stats['totalConfirmed'] == 2
    assert stats['totalCheckedIn'] == 1
    assert stats['checkInRate'] == '50.0'
    assert stats['todayCheckins'] == 1
    assert stats['recentCheckins'][0]['id'] == registrant.id


def test_check_in_stats_empty(client, staff_headers):
    stats = client.get('/api/check-in', headers=staff_headers).get_json()
    assert stats['totalConfirmed'] == 0
    assert stats['checkInRate'] == '0'
