"""
In-memory registry of calculator sessions.

One CalculatorSession per browser (or per header-supplied user), created on
first use. The registry is an LRU bounded by Settings.max_sessions; the
least recently used session is dropped when a new one would exceed it.
"""

import threading
import uuid
from collections import OrderedDict
from typing import Optional

from flask import session as cookie_session

from ..config import Settings
from ..history import HistoryStore
from ..session import CalculatorSession

_sessions: "OrderedDict[str, CalculatorSession]" = OrderedDict()
_sessions_lock = threading.Lock()

_BROWSER_KEY = "browser_id"


def _session_key(owner: Optional[str], from_header: bool) -> str:
    if from_header and owner:
        return f"user:{owner}"
    browser_id = cookie_session.get(_BROWSER_KEY)
    if not browser_id:
        browser_id = uuid.uuid4().hex
        cookie_session[_BROWSER_KEY] = browser_id
    return f"browser:{browser_id}"


def get_session(
    owner: Optional[str],
    store: HistoryStore,
    settings: Settings,
    from_header: bool = False,
) -> CalculatorSession:
    """
    Fetch (or create) the calculator session for the current request.

    Args:
        owner: Current user id, or None when signed out
        store: History store new sessions save into
        settings: Supplies background_saves, local_history_size and
            max_sessions
        from_header: True when owner came from the proxy header

    Returns:
        The session, with its owner updated to the current sign-in state
    """
    key = _session_key(owner, from_header)
    with _sessions_lock:
        calc = _sessions.get(key)
        if calc is None or calc.store is not store:
            calc = CalculatorSession(
                owner,
                store,
                background=settings.background_saves,
                local_history_size=settings.local_history_size,
            )
            _sessions[key] = calc
        _sessions.move_to_end(key)
        while len(_sessions) > max(1, settings.max_sessions):
            _sessions.popitem(last=False)
        calc.owner = owner
    return calc


def session_count() -> int:
    with _sessions_lock:
        return len(_sessions)


def reset_sessions() -> None:
    with _sessions_lock:
        _sessions.clear()
