"""
Flask server for the scicalc web UI.

Provides the JSON API the browser calculator drives: keypad input, the
calculator snapshot, and the signed-in user's calculation history.
"""

import logging
import threading
from typing import Optional

from flask import Flask, current_app, jsonify, request

from ..config import Settings
from ..errors import Unauthorized, UnknownAction, UnknownKey
from ..history import HistoryStore, open_store
from . import auth
from .sessions import get_session, reset_sessions

logger = logging.getLogger(__name__)

app = Flask(__name__)
_store_lock = threading.Lock()


def configure(settings: Optional[Settings] = None, store: Optional[HistoryStore] = None) -> Flask:
    """
    Apply settings to the module-level app.

    Args:
        settings: Settings to use (default: read from the environment)
        store: History store to use (default: opened lazily from
            settings.db_path on first request)

    Returns:
        The configured app
    """
    settings = settings or Settings.from_env()
    app.config["SCICALC_SETTINGS"] = settings
    app.config["HISTORY_STORE"] = store
    app.secret_key = settings.secret_key
    reset_sessions()
    return app


def _settings() -> Settings:
    return current_app.config["SCICALC_SETTINGS"]


def _store() -> HistoryStore:
    store = current_app.config.get("HISTORY_STORE")
    if store is not None:
        return store
    with _store_lock:
        store = current_app.config.get("HISTORY_STORE")
        if store is None:
            store = open_store(_settings().db_path)
            current_app.config["HISTORY_STORE"] = store
            logger.info(f"Opened history store at {_settings().db_path}")
    return store


def _calculator():
    from_header = auth.header_owner() is not None
    return get_session(auth.current_owner(), _store(), _settings(), from_header=from_header)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


@app.route("/api/auth/anonymous", methods=["POST"])
def sign_in_anonymous():
    """Issue an opaque user id and remember it in the session cookie."""
    return jsonify({"user_id": auth.sign_in_anonymous()})


@app.route("/api/auth/sign-out", methods=["POST"])
def sign_out():
    auth.sign_out()
    return jsonify({"ok": True})


@app.route("/api/auth/me", methods=["GET"])
def whoami():
    return jsonify({"user_id": auth.current_owner()})


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


@app.route("/api/calculator", methods=["GET"])
def get_calculator():
    """Return the current calculator snapshot."""
    return jsonify(_calculator().snapshot())


@app.route("/api/calculator", methods=["POST"])
def press():
    """
    Apply one keypad input.

    Expected JSON payload, either:
        {"key": "7"}                       // any keypad label
        {"action": "digit", "value": "7"}  // action + optional value

    Returns:
        JSON snapshot with display, indicator, memory, angle_mode and the
        session's local history
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({"error": "No data provided"}), 400
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    calc = _calculator()
    try:
        if "key" in data:
            calc.press(str(data["key"]))
        else:
            calc.dispatch(data.get("action", ""), data.get("value"))
    except (UnknownKey, UnknownAction) as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(calc.snapshot())


@app.route("/api/calculator/reset", methods=["POST"])
def reset():
    """Reinitialize the calculator, memory included."""
    calc = _calculator()
    calc.reset()
    return jsonify(calc.snapshot())


@app.route("/api/calculator/local-history", methods=["DELETE"])
def clear_local_history():
    """Clear the session's recent list. Stored history is not touched."""
    calc = _calculator()
    calc.clear_local_history()
    return jsonify(calc.snapshot())


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@app.route("/api/history", methods=["GET"])
def list_history():
    """
    List the signed-in user's recent calculations, newest first.

    Query params:
        limit: maximum rows (default: Settings.history_limit)

    Returns:
        [{"id": 3, "expression": "7 + 3", "result": "10", "created_at": "..."}]
        or [] when signed out
    """
    limit = request.args.get("limit", default=_settings().history_limit, type=int)
    records = _store().list_recent(auth.current_owner(), limit)
    return jsonify([r.to_dict() for r in records])


@app.route("/api/history", methods=["POST"])
def append_history():
    """
    Append a calculation for the signed-in user.

    Expected JSON payload:
        {"expression": "7 + 3", "result": "10"}
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({"error": "No data provided"}), 400
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    expression = data.get("expression")
    result = data.get("result")
    if not isinstance(expression, str) or not isinstance(result, str):
        return jsonify({"error": "expression and result are required strings"}), 400

    try:
        record = _store().append(auth.current_owner(), expression, result)
    except Unauthorized as e:
        return jsonify({"error": str(e)}), 401

    return jsonify(record.to_dict()), 201


configure()
