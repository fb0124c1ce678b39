import pytest

from confreg import db
from confreg.models.event_team import EventTeam
from confreg.models.registrant import Registrant


@pytest.fixture
def organizer_headers(make_user, auth_headers_for):
    return auth_headers_for(make_user('event_organizer'))


@pytest.fixture
def make_team(app):
    def _make(name='Team A', capacity=None):
        team = EventTeam(name=name, capacity=capacity)
        db.session.add(team)
        db.session.commit()
        return team

    return _make


def _ids(registration):
    return [r.id for r in registration.registrants]


def _assigned(team_id):
    db.session.expire_all()
    return Registrant.query.filter_by(event_team_id=team_id).count()


def test_bulk_assign_whole_registration(client, make_user, make_registration, make_team,
                                        organizer_headers):
    registration = make_registration(make_user(), status='confirmed', count=3)
    team = make_team(capacity=5)

    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': _ids(registration), 'team_id': team.id},
                           headers=organizer_headers)

    assert response.status_code == 200
    report = response.get_json()
    assert sorted(report['success']) == sorted(_ids(registration))
    assert report['failed'] == []
    assert report['summary'] == {'total': 3, 'successful': 3, 'failed': 0,
                                 'team_name': 'Team A'}
    assert _assigned(team.id) == 3


def test_bulk_assign_rejects_incomplete_group(client, make_user, make_registration,
                                              make_team, organizer_headers):
    registration = make_registration(make_user(), status='confirmed',
                                     names=['AN', 'BINH', 'CHI'])
    team = make_team()
    by_name = {r.full_name: r.id for r in registration.registrants}

    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': [by_name['AN'], by_name['BINH']],
                                 'team_id': team.id},
                           headers=organizer_headers)

    assert response.status_code == 400
    data = response.get_json()
    assert 'CHI' in data['message']
    assert data['missing_registrants'] == [
        {'registrant_id': by_name['CHI'], 'registrant_name': 'CHI'}]
    assert _assigned(team.id) == 0


def test_bulk_assign_ignores_already_assigned_group_members(
        client, make_user, make_registration, make_team, organizer_headers):
    registration = make_registration(make_user(), status='confirmed', names=['AN', 'BINH'])
    first_team = make_team('Team A')
    second_team = make_team('Team B')
    by_name = {r.full_name: r for r in registration.registrants}
    by_name['AN'].event_team_id = first_team.id
    db.session.commit()

    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': [by_name['BINH'].id],
                                 'team_id': second_team.id},
                           headers=organizer_headers)

    assert response.status_code == 200
    assert response.get_json()['summary']['successful'] == 1


def test_bulk_assign_capacity(client, make_user, make_registration, make_team,
                              organizer_headers):
    member = make_registration(make_user(), status='confirmed', count=1)
    team = make_team(capacity=3)
    member.registrants[0].event_team_id = team.id
    db.session.commit()
    registration = make_registration(make_user(), status='confirmed', count=3)

    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': _ids(registration), 'team_id': team.id},
                           headers=organizer_headers)

    assert response.status_code == 400
    assert response.get_json()['message'] == (
        'Not enough capacity. Team has 2 available slots but trying to assign 3 people.')
    assert _assigned(team.id) == 1


def test_bulk_assign_reports_per_registrant_failures(client, make_user, make_registration,
                                                     make_team, auth_headers_for):
    kanto = make_registration(make_user(region='kanto'), status='confirmed', count=1)
    kansai = make_registration(make_user(region='kansai'), status='confirmed', count=1)
    team = make_team()
    regional = make_user('regional_admin', region='kanto')

    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': _ids(kanto) + _ids(kansai) + ['ghost'],
                                 'team_id': team.id},
                           headers=auth_headers_for(regional))

    assert response.status_code == 200
    report = response.get_json()
    assert report['success'] == _ids(kanto)
    reasons = {f['registrant_id']: f['reason'] for f in report['failed']}
    assert reasons == {
        _ids(kansai)[0]: 'Cannot assign registrants from other regions',
        'ghost': 'Registrant not found',
    }
    assert report['summary']['failed'] == 2


def test_bulk_assign_unknown_team(client, sample_registration, organizer_headers):
    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': _ids(sample_registration),
                                 'team_id': 'nope'},
                           headers=organizer_headers)
    assert response.status_code == 404


def test_bulk_assign_validates_body(client, organizer_headers):
    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': []}, headers=organizer_headers)
    assert response.status_code == 400


def test_bulk_assign_role_gate(client, sample_registration, make_team, make_user,
                               auth_headers_for):
    team = make_team()
    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': _ids(sample_registration),
                                 'team_id': team.id},
                           headers=auth_headers_for(make_user('registration_manager')))
    assert response.status_code == 403


def test_create_and_list_teams(client, sample_registration, organizer_headers):
    response = client.post('/api/admin/teams', json={'name': 'Blue', 'capacity': 10},
                           headers=organizer_headers)
    assert response.status_code == 201
    team_id = response.get_json()['team']['id']

    client.post(f'/api/admin/registrants/{_ids(sample_registration)[0]}/assign-team',
                json={'team_id': team_id}, headers=organizer_headers)

    teams = client.get('/api/admin/teams', headers=organizer_headers).get_json()['teams']
    assert [(t['name'], t['member_count']) for t in teams] == [('Blue', 1)]


def test_single_assign_and_remove(client, sample_registration, make_team, organizer_headers):
    team = make_team(capacity=1)
    first, second = _ids(sample_registration)

    response = client.post(f'/api/admin/registrants/{first}/assign-team',
                           json={'team_id': team.id}, headers=organizer_headers)
    assert response.status_code == 200

    again = client.post(f'/api/admin/registrants/{first}/assign-team',
                        json={'team_id': team.id}, headers=organizer_headers)
    assert again.status_code == 400

    full = client.post(f'/api/admin/registrants/{second}/assign-team',
                       json={'team_id': team.id}, headers=organizer_headers)
    assert full.status_code == 400
    assert 'full capacity' in full.get_json()['message']

    response = client.post(f'/api/admin/registrants/{first}/remove-team',
                           headers=organizer_headers)
    assert response.status_code == 200
    assert _assigned(team.id) == 0

    response = client.post(f'/api/admin/registrants/{first}/remove-team',
                           headers=organizer_headers)
    assert response.status_code == 400


def test_unassigned_registrants(client, make_user, make_registration, organizer_headers):
    confirmed = make_registration(make_user(), status='confirmed', count=2)
    make_registration(make_user(), status='pending', count=2)

    data = client.get('/api/admin/registrants/unassigned',
                      headers=organizer_headers).get_json()

    assert sorted(r['id'] for r in data['registrants']) == sorted(_ids(confirmed))


def test_bulk_assign_capacity_counts_only_assignable(client, make_user, make_registration,
                                                     make_team, organizer_headers):
    team = make_team(capacity=2)
    elsewhere = make_team('Team B')
    placed = make_registration(make_user(), status='confirmed', count=1)
    placed.registrants[0].event_team_id = elsewhere.id
    db.session.commit()
    registration = make_registration(make_user(), status='confirmed', count=2)

    response = client.post('/api/admin/registrants/bulk-assign',
                           json={'registrant_ids': _ids(registration) + _ids(placed)
                                 + ['ghost'],
                                 'team_id': team.id},
                           headers=organizer_headers)

    assert response.status_code == 200
    report = response.get_json()
    assert sorted(report['success']) == sorted(_ids(registration))
    reasons = {f['registrant_id']: f['reason'] for f in report['failed']}
    assert reasons == {
        _ids(placed)[0]: 'Already assigned to a team',
        'ghost': 'Registrant not found',
    }
    assert report['summary'] == {'total': 4, 'successful': 2, 'failed': 2,
                                 'team_name': 'Team A'}
    assert _assigned(team.id) == 2
