"""
Error Logger Utility
Captures application errors to the database with request context.
"""

import traceback
import json
import logging
from datetime import datetime
from flask import request, has_request_context

logger = logging.getLogger(__name__)

# Keys to redact from request data
SENSITIVE_KEYS = {
    'password', 'token', 'secret', 'api_key', 'authorization', 'cookie', 'session'
}


def _sanitize_data(data):
    """Redact sensitive keys from a dict."""
    if not isinstance(data, dict):
        return data
    sanitized = {}
    for key, value in data.items():
        if any(s in key.lower() for s in SENSITIVE_KEYS):
            sanitized[key] = '[REDACTED]'
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_data(value)
        else:
            sanitized[key] = str(value)[:500]  # Truncate long values
    return sanitized


def _request_data():
    raw_data = {}
    if request.args:
        raw_data['args'] = dict(request.args)
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        raw_data['json'] = payload
    elif payload is not None:
        raw_data['json'] = {'body': payload}
    if not raw_data:
        return None
    return json.dumps(_sanitize_data(raw_data))[:4000]


def log_error(error, status_code=500):
    """
    Log an error to the database.

    Safe to call from error handlers: internal failures are written to the
    application log instead of propagating.

    Args:
        error: The exception or error object
        status_code: HTTP status code (default 500)

    Returns:
        ErrorLog or None
    """
    from canledger.models import db, ErrorLog

    tb = traceback.format_exc()
    if tb == 'NoneType: None\n':
        tb = None

    entry = ErrorLog(
        timestamp=datetime.utcnow(),
        error_type=type(error).__name__,
        error_message=str(error)[:2000] or type(error).__name__,
        traceback=tb,
        status_code=status_code,
    )

    if has_request_context():
        entry.request_url = request.url[:512] if request.url else None
        entry.request_method = request.method
        entry.ip_address = request.remote_addr
        entry.user_agent = str(request.user_agent)[:512] if request.user_agent else None
        entry.blueprint = request.blueprints[0] if request.blueprints else None
        entry.endpoint = request.endpoint
        entry.request_data = _request_data()

    try:
        db.session.rollback()
        db.session.add(entry)
        db.session.commit()
        return entry
    except Exception as e:
        db.session.rollback()
        logger.error(f"Could not persist error log for {entry.error_type}: {e}")
        return None
