# confreg/utils/auth_helpers.py
from functools import wraps
from flask_jwt_extended import get_jwt_identity
from flask import jsonify
from confreg.models.user import User
from confreg import db

ADMIN_ROLES = ("super_admin", "regional_admin")


def get_current_user():
    """Return the active User behind the JWT identity, or None."""
    try:
        user_id = get_jwt_identity()
        if not user_id:
            return None
        user = db.session.get(User, str(user_id))
        if user and user.is_active:
            return user
        return None
    except (ValueError, TypeError):
        return None


def require_roles(*roles):
    """Decorator restricting a route to users holding one of ``roles``.

    Must be stacked under ``@jwt_required()``.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            user = get_current_user()

            if not user:
                return jsonify({"message": "Unauthorized"}), 401

            if user.role not in roles:
                return jsonify({"message": "Insufficient permissions"}), 403

            return func(*args, **kwargs)

        return wrapper

    return decorator


def get_user_or_401():
    """Return (user, None) or (None, error_response)."""
    user = get_current_user()

    if not user:
        return None, (jsonify({"message": "Unauthorized"}), 401)

    return user, None


def is_admin(user):
    return user is not None and user.role in ADMIN_ROLES
