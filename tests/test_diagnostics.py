import json

import requests

from diagnostics import (
    CIRCULAR_PLACEHOLDER,
    TRUNCATED_PLACEHOLDER,
    safe_dumps,
    to_plain,
)


class Socket:
    def __init__(self):
        self.http_message = None
        self.bytes_written = 512


class ClientRequest:
    def __init__(self):
        self.status = 400
        self.socket = Socket()
        self.socket.http_message = self


class Opaque:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Opaque({self.value})"


def test_plain_values_render_as_json():
    rendered = safe_dumps({"status": 400, "ok": False, "items": [1, "two", None]})

    assert json.loads(rendered) == {"status": 400, "ok": False, "items": [1, "two", None]}
    assert '"status": 400' in rendered


def test_self_referencing_mapping_uses_placeholder():
    node = {"name": "root"}
    node["self"] = node

    assert to_plain(node) == {"name": "root", "self": CIRCULAR_PLACEHOLDER}


def test_indirect_cycle_through_objects_terminates():
    rendered = json.loads(safe_dumps(ClientRequest()))

    assert rendered == {
        "status": 400,
        "socket": {"http_message": CIRCULAR_PLACEHOLDER, "bytes_written": 512},
    }


def test_cycle_through_list_terminates():
    items = []
    items.append(items)

    assert to_plain(items) == [CIRCULAR_PLACEHOLDER]


def test_repeated_reference_is_rendered_once():
    shared = {"id": 1}

    assert to_plain({"a": shared, "b": shared}) == {"a": {"id": 1}, "b": CIRCULAR_PLACEHOLDER}


def test_exception_renders_name_and_message():
    assert to_plain(ValueError("bad card")) == {"name": "ValueError", "message": "bad card"}


def test_http_error_includes_response():
    response = requests.Response()
    response.status_code = 413
    response.reason = "Payload Too Large"
    response._content = b"too big"
    response.headers["Content-Type"] = "text/plain"
    error = requests.HTTPError("413 Client Error", response=response)

    rendered = to_plain(error)

    assert rendered["name"] == "HTTPError"
    assert rendered["response"] == {
        "status": 413,
        "statusText": "Payload Too Large",
        "headers": {"Content-Type": "text/plain"},
        "data": "too big",
    }


def test_bytes_and_non_string_keys():
    assert to_plain({1: b"caf\xc3\xa9", (2, 3): b"\xff"}) == {"1": "café", "(2, 3)": "�"}


def test_objects_without_attributes_fall_back_to_repr():
    assert to_plain([Opaque(7)]) == ["Opaque(7)"]


def test_deep_nesting_is_truncated():
    nested = current = {}
    for _ in range(20):
        current["next"] = {}
        current = current["next"]

    plain = to_plain(nested, max_depth=3)

    assert plain == {"next": {"next": {"next": TRUNCATED_PLACEHOLDER}}}


def test_safe_dumps_never_raises_on_nan():
    assert safe_dumps({"value": float("nan")}) == '{\n  "value": NaN\n}'


class BrokenRepr:
    __slots__ = ()

    def __repr__(self):
        raise RuntimeError("repr exploded")


class BrokenStrError(Exception):
    def __str__(self):
        raise RuntimeError("str exploded")


def test_unrepresentable_objects_do_not_break_rendering():
    rendered = json.loads(safe_dumps({"status": 400, "socket": BrokenRepr()}))

    assert rendered == {"status": 400, "socket": "<unrepresentable BrokenRepr>"}


def test_exception_with_broken_str_still_renders():
    assert to_plain(BrokenStrError()) == {
        "name": "BrokenStrError",
        "message": "<unrepresentable BrokenStrError>",
    }


def test_mapping_keys_with_broken_str_still_render():
    class BrokenKey:
        def __str__(self):
            raise RuntimeError("key exploded")

    assert to_plain({BrokenKey(): 1}) == {"<unrepresentable BrokenKey>": 1}
