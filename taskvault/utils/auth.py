from functools import wraps

from flask import current_app, g, request

from taskvault.errors import ForbiddenError, UnauthorizedError
from taskvault.services.accounts import AuthFailure


def get_accounts():
    return current_app.extensions["taskvault.accounts"]


def bearer_token():
    """Token part of ``Authorization: Bearer <token>``, or None."""
    header = request.headers.get("Authorization", "")
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def auth_required(view):
    """Resolve the caller's account id into ``g.account_id``.

    With AUTH_ENABLED off every request passes and ``g.account_id`` is None,
    which leaves the task store unscoped.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_app.config["AUTH_ENABLED"]:
            g.account_id = None
            return view(*args, **kwargs)
        result = get_accounts().verify(bearer_token())
        if result.failure is AuthFailure.UNAUTHORIZED:
            raise UnauthorizedError()
        if result.failure is AuthFailure.FORBIDDEN:
            raise ForbiddenError()
        g.account_id = result.account_id
        return view(*args, **kwargs)

    return wrapper
