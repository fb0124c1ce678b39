import secrets
import string

from confreg.utils.datetime_utils import to_local, utcnow

_ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 6
MAX_ATTEMPTS = 20


def _random_suffix(length=SUFFIX_LENGTH):
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def build_invoice_code(now=None, suffix=None):
    """Format ``INV-<yyyymmdd>-<6 base36 chars>`` for the venue-local date."""
    now = to_local(now or utcnow())
    return f"INV-{now.strftime('%Y%m%d')}-{suffix or _random_suffix()}"


def generate_unique_invoice_code(session, model, column="invoice_code"):
    """Generate an invoice code not already present in ``model.column``.

    Collisions are rare; each attempt costs one lookup.
    """
    col = getattr(model, column)
    for _ in range(MAX_ATTEMPTS):
        candidate = build_invoice_code()
        exists = session.query(col).filter(col == candidate).first()
        if not exists:
            return candidate
    raise RuntimeError("Unable to generate unique invoice code")
