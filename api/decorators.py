from __future__ import annotations
from functools import wraps
from flask import request

from .extensions import get_services


def jwt_required():
    """Protect a view with a bearer access token.

    The authenticated Identity is passed to the view as its first positional
    argument. Any authentication failure raises AuthenticationError before the
    view runs; the app's error handler turns it into a 401 envelope.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            authenticator = get_services().authenticator
            identity = authenticator.authenticate(request.headers.get("Authorization"))
            return fn(identity, *args, **kwargs)

        return wrapper

    return decorator
