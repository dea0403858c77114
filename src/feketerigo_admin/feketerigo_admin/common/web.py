from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable, Optional

from flask import jsonify, session

from ..core.enums import ProfileType
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    RemoteFunctionError,
    StorageError,
    ValidationError,
)
from .notices import Notice, Outcome

logger = logging.getLogger("feketerigo_admin.web")

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (RemoteFunctionError, 502),
    (StorageError, 502),
)


def ok(data=None, *, notices: Iterable[Notice] = (), status: int = 200):
    return (
        jsonify({"success": True, "data": data, "notices": [n.to_dict() for n in notices]}),
        status,
    )


def ok_outcome(outcome: Outcome, data=None, *, status: int = 200):
    return ok(outcome.value if data is None else data, notices=outcome.notices, status=status)


def fail(message: str, status: int = 400):
    notice = {"level": "error", "message": message}
    return jsonify({"success": False, "error": message, "notices": [notice]}), status


def status_for(error: Exception) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 500


def api_errors(view):
    """Translate domain errors raised by a service into the JSON envelope."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            status = status_for(e)
            if status >= 500:
                logger.error("%s failed: %s", view.__name__, e)
            return fail(str(e), status)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return fail("Váratlan hiba történt", 500)

    return wrapper


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Kérjük jelentkezzen be", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*profile_types: ProfileType):
    allowed = {p.value for p in profile_types}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Kérjük jelentkezzen be", 401)
            if session.get("role") not in allowed:
                return fail("Nincs jogosultsága ehhez a művelethez", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
