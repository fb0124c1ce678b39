import pytest

from confreg import db
from confreg.models.cancel_request import CancelRequest
from confreg.models.registration import Registration

BANK_DETAILS = {
    'bank_account_number': '1234567',
    'bank_name': 'MUFG',
    'account_holder_name': 'NGUYEN VAN A',
}


def _refund_body(registration_id, **overrides):
    body = {
        'registration_id': registration_id,
        'reason': 'Cannot travel to the venue this year',
        'request_type': 'refund',
        **BANK_DETAILS,
    }
    body.update(overrides)
    return body


def _status(registration_id):
    db.session.expire_all()
    return db.session.get(Registration, registration_id).status


def test_refund_request(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='confirmed', total_amount=12000)

    response = client.post('/api/cancel-requests', json=_refund_body(registration.id),
                           headers=auth_headers_for(owner))

    assert response.status_code == 201
    data = response.get_json()
    assert data['cancel_request']['status'] == 'pending'
    assert data['cancel_request']['refund_amount'] == 12000
    assert data['registration']['status'] == 'cancel_pending'
    assert data['registration']['notes'].startswith('Cancel request submitted: ')


def test_donation_bypasses_cancel_request(client, make_user, make_registration,
                                          auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='pending')

    response = client.post('/api/cancel-requests',
                           json={'registration_id': registration.id,
                                 'reason': 'Please keep the fee as a donation',
                                 'request_type': 'donation'},
                           headers=auth_headers_for(owner))

    assert response.status_code == 201
    assert 'cancel_request' not in response.get_json()
    assert _status(registration.id) == 'donation'
    assert CancelRequest.query.count() == 0


@pytest.mark.parametrize('second_type', ['refund', 'donation'])
def test_second_request_while_pending_conflicts(client, make_user, make_registration,
                                                auth_headers_for, second_type):
    owner = make_user()
    registration = make_registration(owner, status='confirmed')
    headers = auth_headers_for(owner)
    client.post('/api/cancel-requests', json=_refund_body(registration.id), headers=headers)

    response = client.post('/api/cancel-requests',
                           json=_refund_body(registration.id, request_type=second_type),
                           headers=headers)

    assert response.status_code == 409
    assert CancelRequest.query.count() == 1
    assert _status(registration.id) == 'cancel_pending'


def test_other_users_registration_is_not_found(client, make_user, make_registration,
                                               auth_headers_for):
    registration = make_registration(make_user(), status='confirmed')

    response = client.post('/api/cancel-requests', json=_refund_body(registration.id),
                           headers=auth_headers_for(make_user()))

    assert response.status_code == 404


@pytest.mark.parametrize('status', ['temp_confirmed', 'checked_in', 'cancelled', 'donation'])
def test_non_cancellable_status(client, make_user, make_registration, auth_headers_for,
                                status):
    owner = make_user()
    registration = make_registration(owner, status=status)

    response = client.post('/api/cancel-requests', json=_refund_body(registration.id),
                           headers=auth_headers_for(owner))

    assert response.status_code == 400
    assert _status(registration.id) == status


def test_refund_needs_bank_details(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='confirmed')

    response = client.post('/api/cancel-requests',
                           json=_refund_body(registration.id, bank_account_number='123',
                                             bank_name=None),
                           headers=auth_headers_for(owner))

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'bank_account_number' in errors
    assert 'bank_name' in errors


def test_reason_minimum_length(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='confirmed')

    response = client.post('/api/cancel-requests',
                           json=_refund_body(registration.id, reason='too short'),
                           headers=auth_headers_for(owner))

    assert response.status_code == 400


def test_my_cancel_requests(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='confirmed')
    headers = auth_headers_for(owner)
    client.post('/api/cancel-requests', json=_refund_body(registration.id), headers=headers)

    data = client.get('/api/cancel-requests', headers=headers).get_json()
    assert len(data['cancel_requests']) == 1

    other = client.get('/api/cancel-requests',
                       headers=auth_headers_for(make_user())).get_json()
    assert other['cancel_requests'] == []


@pytest.fixture
def pending_request(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='confirmed')
    client.post('/api/cancel-requests', json=_refund_body(registration.id),
                headers=auth_headers_for(owner))
    return CancelRequest.query.filter_by(registration_id=registration.id).one()


def test_approve_then_process(client, pending_request, make_user, auth_headers_for):
    reviewer = make_user('registration_manager')
    headers = auth_headers_for(reviewer)
    url = f'/api/admin/cancel-requests/{pending_request.id}'
    registration_id = pending_request.registration_id

    response = client.patch(url, json={'action': 'approved'}, headers=headers)
    assert response.status_code == 200
    assert response.get_json()['registration_status'] == 'cancel_accepted'
    assert response.get_json()['processedBy'] == reviewer.id

    response = client.patch(url, json={'action': 'processed', 'admin_notes': 'refunded'},
                            headers=headers)
    assert response.status_code == 200
    assert _status(registration_id) == 'cancel_processed'

    response = client.patch(url, json={'action': 'approved'}, headers=headers)
    assert response.status_code == 400


def test_reject_cancel_request(client, pending_request, make_user, auth_headers_for):
    headers = auth_headers_for(make_user('cashier_role'))
    url = f'/api/admin/cancel-requests/{pending_request.id}'

    response = client.patch(url, json={'action': 'rejected', 'admin_notes': 'too late'},
                            headers=headers)

    assert response.status_code == 200
    assert _status(pending_request.registration_id) == 'cancel_rejected'
    assert client.patch(url, json={'action': 'processed'}, headers=headers).status_code == 400


def test_process_requires_approval_first(client, pending_request, make_user,
                                         auth_headers_for):
    response = client.patch(f'/api/admin/cancel-requests/{pending_request.id}',
                            json={'action': 'processed'},
                            headers=auth_headers_for(make_user('super_admin')))
    assert response.status_code == 400


def test_review_is_role_gated(client, pending_request, make_user, auth_headers_for):
    response = client.patch(f'/api/admin/cancel-requests/{pending_request.id}',
                            json={'action': 'approved'},
                            headers=auth_headers_for(make_user('event_organizer')))
    assert response.status_code == 403


def test_admin_list_filters_by_status(client, pending_request, make_user, auth_headers_for):
    headers = auth_headers_for(make_user('super_admin'))

    pending = client.get('/api/admin/cancel-requests?status=pending', headers=headers)
    processed = client.get('/api/admin/cancel-requests?status=processed', headers=headers)

    assert len(pending.get_json()['cancel_requests']) == 1
    assert processed.get_json()['cancel_requests'] == []
