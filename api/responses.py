"""Uniform JSON envelope: {success, message, data?, errors?}."""
from __future__ import annotations

from typing import Any, Iterable, Optional

from flask import jsonify


def success_response(message: str = "", data: Any = None, status: int = 200, **extra):
    payload = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload), status


def error_response(message: str, status: int, errors: Optional[Iterable[str]] = None, headers=None):
    payload = {"success": False, "message": message}
    if errors:
        payload["errors"] = list(errors)
    if headers:
        return jsonify(payload), status, headers
    return jsonify(payload), status
