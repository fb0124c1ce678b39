import os

import pytest
from flask_jwt_extended import create_access_token

from confreg import create_app, db
from confreg.models.event_config import EventConfig
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.models.user import User
from confreg.utils.invoice_utils import build_invoice_code


def _remove_db_file(path):
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def app():
    """Application backed by a fresh file-based SQLite database.

    A file (not ``:memory:``) so the test client and the test body share
    the same data. The app context stays pushed for the whole test.
    """
    _app = create_app('testing')
    db_path = _app.config['TEST_DB_PATH']
    _remove_db_file(db_path)

    with _app.app_context():
        db.create_all()

        yield _app

        db.session.remove()
        db.drop_all()

    _remove_db_file(db_path)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory creating users; emails default to ``<role><n>@test.com``."""
    counter = {'n': 0}

    def _make(role='participant', email=None, region=None, password='password123',
              full_name='Test User'):
        counter['n'] += 1
        user = User()
        user.email = email or f"{role}{counter['n']}@test.com"
        user.full_name = full_name
        user.role = role
        user.region = region
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def auth_headers_for(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture
def active_event(app):
    event = EventConfig(name='Youth Day', base_price=6000, is_active=True)
    db.session.add(event)
    db.session.commit()
    return event


@pytest.fixture
def make_registration(app):
    """Factory inserting a registration with ``count`` registrants directly."""

    def _make(owner, status='pending', count=2, names=None, total_amount=None):
        names = names or [f'PERSON {i + 1}' for i in range(count)]
        registration = Registration(
            user_id=owner.id,
            invoice_code=build_invoice_code(),
            status=status,
            total_amount=total_amount if total_amount is not None else 6000 * len(names),
            participant_count=len(names),
        )
        registration.registrants = [
            Registrant(
                full_name=name,
                gender='female',
                age_group='26_35',
                shirt_size='M',
                email=f'person{i + 1}@test.com',
                is_primary=i == 0,
            )
            for i, name in enumerate(names)
        ]
        db.session.add(registration)
        db.session.commit()
        return registration

    return _make


@pytest.fixture
def sample_registration(make_user, make_registration):
    """A confirmed two-person registration owned by a participant."""
    owner = make_user('participant', email='owner@test.com')
    return make_registration(owner, status='confirmed')


@pytest.fixture
def registrant_payload():
    """Factory for one valid registrant entry of a registration request."""

    def _payload(**overrides):
        data = {
            'full_name': 'maria nguyen',
            'saint_name': 'maria',
            'gender': 'female',
            'age_group': '26_35',
            'shirt_size': 'M',
            'email': 'maria@test.com',
        }
        data.update(overrides)
        return data

    return _payload
