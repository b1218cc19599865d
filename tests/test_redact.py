from __future__ import annotations

from pyrestore._redact import redact_for_log
from pyrestore.models.request import RequestConfig


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
        "data": {"username": "jim", "password": "pw", "nested": {"refresh_token": "r"}},
    }

    redacted = redact_for_log(payload)
    assert redacted["headers"]["Authorization"] == "<redacted>"
    assert redacted["headers"]["Accept"] == "application/json"
    assert redacted["data"]["password"] == "<redacted>"
    assert redacted["data"]["username"] == "jim"
    assert redacted["data"]["nested"]["refresh_token"] == "<redacted>"


def test_redact_for_log_handles_request_config() -> None:
    config = RequestConfig(url="/login", headers={"Cookie": "sid=1"}, data={"token": "t"})

    redacted = redact_for_log(config)
    assert redacted["headers"]["Cookie"] == "<redacted>"
    assert redacted["data"]["token"] == "<redacted>"
    assert redacted["url"] == "/login"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_matches_field_name_markers() -> None:
    payload = {"newPassword": "pw", "clientSecret": "s", "tokenCount": 3, "name": "Ann"}

    redacted = redact_for_log(payload)

    assert redacted["newPassword"] == "<redacted>"
    assert redacted["clientSecret"] == "<redacted>"
    assert redacted["tokenCount"] == "<redacted>"
    assert redacted["name"] == "Ann"
    assert payload["newPassword"] == "pw"


def test_redact_for_log_summarises_bytes() -> None:
    assert redact_for_log({"file": b"abc"}) == {"file": "<3 bytes>"}
