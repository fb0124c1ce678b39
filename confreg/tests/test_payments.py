import pytest

from confreg import db
from confreg.models.event_log import EventLog
from confreg.models.receipt import Receipt
from confreg.models.registration import Registration
from confreg.models.ticket import Ticket
from confreg.utils.token_utils import verify_ticket_token

RECEIPT_URL = 'https://files.example.com/receipts/transfer-001.jpg'


def _status(registration_id):
    db.session.expire_all()
    return db.session.get(Registration, registration_id).status


def test_owner_reports_payment(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner)

    response = client.post('/api/payments',
                           json={'invoiceCode': registration.invoice_code,
                                 'receiptUrl': RECEIPT_URL, 'amount': 12000},
                           headers=auth_headers_for(owner))

    assert response.status_code == 201
    data = response.get_json()
    assert data['registration']['status'] == 'report_paid'
    assert data['receipt']['file_name'] == 'transfer-001.jpg'
    assert Receipt.query.filter_by(registration_id=registration.id).count() == 1


def test_report_payment_for_other_users_invoice(client, make_user, make_registration,
                                                auth_headers_for):
    registration = make_registration(make_user())

    response = client.post('/api/payments',
                           json={'invoiceCode': registration.invoice_code,
                                 'receiptUrl': RECEIPT_URL},
                           headers=auth_headers_for(make_user()))

    assert response.status_code == 404


def test_report_payment_twice(client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='report_paid')

    response = client.post('/api/payments',
                           json={'invoiceCode': registration.invoice_code,
                                 'receiptUrl': RECEIPT_URL},
                           headers=auth_headers_for(owner))

    assert response.status_code == 400
    assert Receipt.query.count() == 0


def test_cashier_confirm_then_manager_confirm_issues_tickets(
        client, make_user, make_registration, auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='report_paid')
    cashier = make_user('cashier_role')
    manager = make_user('registration_manager')

    response = client.post(f'/api/cashier/payments/{registration.id}/confirm',
                           json={}, headers=auth_headers_for(cashier))
    assert response.status_code == 200
    assert response.get_json()['status'] == 'confirm_paid'
    assert Ticket.query.count() == 0

    response = client.post(f'/api/admin/registrations/{registration.id}/confirm',
                           json={'admin_notes': 'checked bank statement'},
                           headers=auth_headers_for(manager))
    assert response.status_code == 200
    assert _status(registration.id) == 'confirmed'

    tickets = Ticket.query.all()
    assert len(tickets) == 2
    registrant_ids = {r.id for r in db.session.get(Registration, registration.id).registrants}
    for ticket in tickets:
        resolved, err = verify_ticket_token(ticket.qr_code)
        assert err is None
        assert resolved == ticket.registrant_id
        assert resolved in registrant_ids

    events = [e.event_type for e in EventLog.query.order_by(EventLog.created_at).all()]
    assert set(events) == {'cashier_confirm', 'manager_confirm'}


def test_cashier_reject_requires_notes(client, make_user, make_registration,
                                       auth_headers_for):
    registration = make_registration(make_user(), status='report_paid')
    cashier = make_user('cashier_role')
    url = f'/api/cashier/payments/{registration.id}/reject'

    assert client.post(url, json={}, headers=auth_headers_for(cashier)).status_code == 400

    response = client.post(url, json={'admin_notes': 'amount does not match'},
                           headers=auth_headers_for(cashier))
    assert response.status_code == 200
    assert _status(registration.id) == 'payment_rejected'


def test_participant_cannot_use_cashier_routes(client, make_user, make_registration,
                                              auth_headers_for):
    registration = make_registration(make_user(), status='report_paid')
    response = client.post(f'/api/cashier/payments/{registration.id}/confirm',
                           json={}, headers=auth_headers_for(make_user()))
    assert response.status_code == 403
    assert _status(registration.id) == 'report_paid'


def test_cashier_confirm_requires_reported_payment(client, make_user, make_registration,
                                                   auth_headers_for):
    registration = make_registration(make_user(), status='pending')
    response = client.post(f'/api/cashier/payments/{registration.id}/confirm',
                           json={}, headers=auth_headers_for(make_user('cashier_role')))
    assert response.status_code == 400


def test_manager_confirm_requires_cashier_verification(client, make_user, make_registration,
                                                       auth_headers_for):
    registration = make_registration(make_user(), status='report_paid')
    response = client.post(f'/api/admin/registrations/{registration.id}/confirm',
                           json={}, headers=auth_headers_for(make_user('registration_manager')))
    assert response.status_code == 400
    assert _status(registration.id) == 'report_paid'


@pytest.mark.parametrize('decision,expected,tickets', [
    ('confirm_paid', 'confirmed', 2),
    ('payment_rejected', 'payment_rejected', 0),
])
def test_admin_review(client, make_user, make_registration, auth_headers_for,
                      decision, expected, tickets):
    registration = make_registration(make_user(), status='report_paid')
    admin = make_user('super_admin')

    response = client.patch('/api/payments',
                            json={'registrationId': registration.id, 'status': decision,
                                  'adminNotes': 'reviewed'},
                            headers=auth_headers_for(admin))

    assert response.status_code == 200
    assert _status(registration.id) == expected
    assert Ticket.query.count() == tickets


def test_regional_admin_review_is_role_gated(client, make_user, make_registration,
                                             auth_headers_for):
    registration = make_registration(make_user(), status='report_paid')
    response = client.patch('/api/payments',
                            json={'registrationId': registration.id,
                                  'status': 'confirm_paid'},
                            headers=auth_headers_for(make_user('cashier_role')))
    assert response.status_code == 403


def test_tickets_for_confirmed_registration(client, make_user, make_registration,
                                            auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='report_paid')
    client.patch('/api/payments',
                 json={'registrationId': registration.id, 'status': 'confirm_paid'},
                 headers=auth_headers_for(make_user('super_admin')))

    response = client.get(f'/api/tickets/{registration.invoice_code}',
                          headers=auth_headers_for(owner))

    assert response.status_code == 200
    registrants = response.get_json()['registrants']
    assert len(registrants) == 2
    assert all(r['ticket']['qr_code'].startswith('t:') for r in registrants)


def test_tickets_hidden_before_confirmation(client, make_user, make_registration,
                                            auth_headers_for):
    owner = make_user()
    registration = make_registration(owner, status='confirm_paid')
    response = client.get(f'/api/tickets/{registration.invoice_code}',
                          headers=auth_headers_for(owner))
    assert response.status_code == 400


def test_tickets_are_owner_only(client, sample_registration, make_user, auth_headers_for):
    response = client.get(f'/api/tickets/{sample_registration.invoice_code}',
                          headers=auth_headers_for(make_user('super_admin')))
    assert response.status_code == 404


def test_portrait_update(client, sample_registration, make_user, auth_headers_for):
    registrant = sample_registration.registrants[0]
    url = f'/api/registrants/{registrant.id}/portrait'
    body = {'portrait_url': 'https://files.example.com/portraits/p1.png'}

    assert client.put(url, json=body, headers=auth_headers_for(make_user())).status_code == 403

    response = client.put(url, json=body, headers=auth_headers_for(sample_registration.user))
    assert response.status_code == 200
    assert response.get_json()['registrant']['portrait_url'] == body['portrait_url']
