from functools import wraps
from flask import g, jsonify
from security.session import get_session_from_request


def load_current_user():
    """before_request hook: resolve session, user and role once per request."""
    g.user = None
    g.session = None
    g.role = None

    sess = get_session_from_request()
    if sess is None or sess.user is None:
        return
    g.session = sess
    g.user = sess.user
    g.role = sess.user.club_role


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper
