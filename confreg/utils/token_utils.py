from itsdangerous import URLSafeSerializer, BadSignature
from flask import current_app

SALT_TICKET = "ticket-qr-token"
TICKET_PREFIX = "t:"


def _ticket_serializer():
    secret = current_app.config.get("SECRET_KEY", "fallback-key")
    return URLSafeSerializer(secret, salt=SALT_TICKET)


def generate_ticket_token(registrant_id: str) -> str:
    """Signed token encoded in a registrant's badge QR code."""
    s = _ticket_serializer()
    return TICKET_PREFIX + s.dumps(str(registrant_id))


def verify_ticket_token(token: str):
    """Return (registrant_id, None) on success or (None, 'invalid') on failure."""
    if not token or not token.startswith(TICKET_PREFIX):
        return None, "invalid"

    raw = token[len(TICKET_PREFIX):]
    s = _ticket_serializer()
    try:
        val = s.loads(raw)
    except BadSignature:
        return None, "invalid"
    if not isinstance(val, str) or not val:
        return None, "invalid"
    return val, None
