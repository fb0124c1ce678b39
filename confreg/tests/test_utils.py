import re
from datetime import datetime, timezone

import pytest

from confreg.models.registration import Registration
from confreg.utils.datetime_utils import ensure_utc, format_local_datetime, to_local
from confreg.utils.invoice_utils import build_invoice_code, generate_unique_invoice_code
from confreg.utils.token_utils import generate_ticket_token, verify_ticket_token


def test_invoice_code_uses_venue_local_date(app):
    # 16:30 UTC is already the next day in Tokyo
    now = datetime(2026, 3, 31, 16, 30, tzinfo=timezone.utc)
    assert build_invoice_code(now, suffix='ABC123') == 'INV-20260401-ABC123'


def test_invoice_code_format(app):
    assert re.fullmatch(r'INV-\d{8}-[0-9A-Z]{6}', build_invoice_code())


def test_generate_unique_invoice_code_gives_up(app, sample_registration, monkeypatch):
    monkeypatch.setattr('confreg.utils.invoice_utils.build_invoice_code',
                        lambda: sample_registration.invoice_code)
    with pytest.raises(RuntimeError):
        generate_unique_invoice_code(Registration.query.session, Registration)


def test_ticket_token_round_trip(app):
    token = generate_ticket_token('registrant-1')
    assert token.startswith('t:')
    assert verify_ticket_token(token) == ('registrant-1', None)


@pytest.mark.parametrize('token', [None, '', 'registrant-1', 't:garbage'])
def test_ticket_token_rejects_bad_input(app, token):
    assert verify_ticket_token(token) == (None, 'invalid')


def test_ticket_token_depends_on_secret(app):
    token = generate_ticket_token('registrant-1')
    app.config['SECRET_KEY'] = 'another-secret'
    assert verify_ticket_token(token) == (None, 'invalid')


def test_naive_datetimes_are_utc(app):
    naive = datetime(2026, 1, 1, 0, 0)
    assert ensure_utc(naive).tzinfo == timezone.utc
    assert to_local(naive).hour == 9
    assert format_local_datetime(naive) == '09:00:00 01/01/2026'
