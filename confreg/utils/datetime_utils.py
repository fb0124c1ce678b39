from datetime import datetime, timezone
from marshmallow import ValidationError
from flask import current_app

DEFAULT_TIMEZONE = 'Asia/Tokyo'


def utcnow():
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt):
    """Return dt as an aware UTC datetime.

    SQLite hands back naive datetimes for columns declared with timezone=True;
    every timestamp this application writes is UTC, so naive values are read
    as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime_with_timezone(dt_string):
    """Parse an ISO string (or '%Y-%m-%d %H:%M:%S') into an aware UTC datetime.

    Raises ValidationError on unparseable input.
    """
    if dt_string is None:
        return None

    if isinstance(dt_string, datetime):
        return ensure_utc(dt_string)

    if isinstance(dt_string, str):
        try:
            dt = datetime.fromisoformat(dt_string)
        except ValueError:
            try:
                dt = datetime.strptime(dt_string, '%Y-%m-%d %H:%M:%S')
            except ValueError:
                raise ValidationError(f"Invalid date format: {dt_string}")
        return ensure_utc(dt)

    raise ValidationError(f"Unrecognized date value: {dt_string}")


def _app_timezone():
    import zoneinfo

    try:
        name = current_app.config.get('APP_TIMEZONE', DEFAULT_TIMEZONE)
    except RuntimeError:
        # outside an application context
        name = DEFAULT_TIMEZONE
    return zoneinfo.ZoneInfo(name)


def to_local(dt):
    """Convert a stored timestamp to the venue timezone."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(_app_timezone())


def format_local_datetime(dt):
    """Render a timestamp the way staff read it at the venue: 'HH:MM:SS DD/MM/YYYY'."""
    local = to_local(dt)
    if local is None:
        return ''
    return local.strftime('%H:%M:%S %d/%m/%Y')


def safe_iso(dt):
    """ISO 8601 string in UTC for a datetime, None for empty values."""
    if not dt:
        return None
    if isinstance(dt, datetime):
        return ensure_utc(dt).isoformat()
    if hasattr(dt, 'isoformat'):
        return dt.isoformat()
    return str(dt)
