from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from confreg import db
from confreg.models.event_log import EventLog


def record_event(event_type, user_id=None, target_id=None, target_type=None, details=None):
    """Append an audit row in its own transaction.

    Failures are logged and reported as False; callers never abort on them.
    """
    try:
        db.session.add(EventLog(
            event_type=event_type,
            user_id=user_id,
            target_id=target_id,
            target_type=target_type,
            details=details or {},
        ))
        db.session.commit()
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(
            f"Audit log '{event_type}' for {target_type}:{target_id} failed: {e}")
        return False
