"""
Custom route decorators.

- confirmation_required: destructive routes (unit / seller delete) only run
  when the caller explicitly confirmed, via ?confirm=true or a JSON body
  with "confirm": true. The store itself never asks.
- json_object_required: write routes that read fields from the request body
  reject anything that is not a JSON object with a 400.
"""

from functools import wraps

from flask import jsonify, request

_TRUTHY = ("1", "true", "yes")


def _is_confirmed():
    if request.args.get("confirm", "").lower() in _TRUTHY:
        return True
    body = request.get_json(silent=True)
    return isinstance(body, dict) and body.get("confirm") is True


def confirmation_required(f):
    """Reject the request with 400 unless the caller confirmed the action."""

    @wraps(f)
    def decorated(*args, **kwargs):
        if not _is_confirmed():
            return jsonify({"error": "Confirmation required."}), 400
        return f(*args, **kwargs)

    return decorated


def json_object_required(f):
    """Reject the request with 400 unless the body parses to a JSON object."""

    @wraps(f)
    def decorated(*args, **kwargs):
        if not isinstance(request.get_json(force=True, silent=True), dict):
            return jsonify({"error": "Expected a JSON object."}), 400
        return f(*args, **kwargs)

    return decorated
