from functools import wraps

from flask import jsonify, session


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not session.get("user"):
            return jsonify(error="Unauthorized"), 401
        return view(*args, **kwargs)

    return wrapped
