"""Render arbitrary objects as JSON text for error messages.

Transport responses and exceptions can hold references back to
themselves (a response pointing at its socket pointing back at the
response), so ``json.dumps`` on them fails or recurses forever. The
helpers here walk the graph first, replacing anything already visited
with a placeholder, and only then hand a plain structure to ``json``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict, Optional

import requests

CIRCULAR_PLACEHOLDER = "[Circular]"
TRUNCATED_PLACEHOLDER = "[Truncated]"
DEFAULT_MAX_DEPTH = 8

_SCALARS = (str, int, float, bool, type(None))


def _describe_response(response: requests.Response) -> dict:
    try:
        data: Any = response.text
    except Exception:  # the body may already be consumed or undecodable
        data = None
    return {
        "status": response.status_code,
        "statusText": response.reason,
        "headers": dict(response.headers),
        "data": data,
    }


def _unrepresentable(value: Any) -> str:
    return f"<unrepresentable {type(value).__name__}>"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return _unrepresentable(value)


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return _unrepresentable(value)


def _describe_exception(exc: BaseException) -> dict:
    described = {"name": type(exc).__name__, "message": _safe_str(exc)}
    response = getattr(exc, "response", None)
    if response is not None:
        described["response"] = response
    return described


def _instance_attributes(obj: Any) -> Optional[dict]:
    try:
        attributes = vars(obj)
    except TypeError:
        return None
    return {key: value for key, value in attributes.items() if not callable(value)}


def to_plain(obj: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Convert ``obj`` into JSON-compatible data without following cycles."""
    # Visited objects stay referenced so their ids cannot be reused mid-walk.
    seen: Dict[int, Any] = {}

    def _walk(value: Any, depth: int) -> Any:
        if isinstance(value, _SCALARS):
            return value
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        if depth >= max_depth:
            return TRUNCATED_PLACEHOLDER
        if id(value) in seen:
            return CIRCULAR_PLACEHOLDER
        seen[id(value)] = value

        if isinstance(value, Mapping):
            return {_safe_str(key): _walk(item, depth + 1) for key, item in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [_walk(item, depth + 1) for item in value]
        if isinstance(value, requests.Response):
            return _walk(_describe_response(value), depth)
        if isinstance(value, BaseException):
            return _walk(_describe_exception(value), depth)

        attributes = _instance_attributes(value)
        if attributes is None:
            return _safe_repr(value)
        return {key: _walk(item, depth + 1) for key, item in attributes.items()}

    return _walk(obj, 0)


def safe_dumps(obj: Any, *, indent: int = 2, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Return a JSON rendering of ``obj`` that is safe for cyclic graphs."""
    plain = to_plain(obj, max_depth=max_depth)
    return json.dumps(plain, indent=indent, ensure_ascii=False, default=_safe_repr)
