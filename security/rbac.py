from functools import wraps
from flask import g, jsonify

from utils.roles import Role


def require_roles(*role_names):
    """
    Usage: @require_roles(Role.ADMIN)
    """
    allowed = {Role.parse(r) for r in role_names}

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if getattr(g, "user", None) is None:
                return jsonify(error="Authentication required"), 401

            if getattr(g, "role", None) not in allowed:
                return jsonify(error="Forbidden"), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
