"""
Authentication collaborator.

The calculator only needs an opaque user id. It comes from a trusted proxy
header when one is configured on the request, otherwise from the signed
Flask session cookie set by the anonymous sign-in endpoint.
"""

import uuid
from typing import Optional

from flask import current_app, request, session

_USER_KEY = "user_id"


def header_owner() -> Optional[str]:
    """User id supplied by the proxy header, if any."""
    header = current_app.config["SCICALC_SETTINGS"].user_header
    if not header:
        return None
    return request.headers.get(header) or None


def current_owner() -> Optional[str]:
    """Return the signed-in user's id, or None when unauthenticated."""
    return header_owner() or session.get(_USER_KEY) or None


def sign_in_anonymous() -> str:
    user_id = session.get(_USER_KEY)
    if not user_id:
        user_id = uuid.uuid4().hex
        session[_USER_KEY] = user_id
    return user_id


def sign_out() -> None:
    session.pop(_USER_KEY, None)
