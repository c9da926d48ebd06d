from __future__ import annotations

from pyrivian._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "data": {
            "login": {
                "accessToken": "AT",
                "refreshToken": "RT",
                "userSessionToken": "UT",
                "__typename": "MobileLoginResponse",
            }
        },
        "variables": {"email": "user@example.com", "password": "pw", "otpCode": "123456"},
        "headers": {"Csrf-Token": "c", "A-Sess": "a", "U-Sess": "u", "Accept": "application/json"},
    }

    redacted = redact_for_log(payload)
    login = redacted["data"]["login"]
    assert login["accessToken"] == "<redacted>"
    assert login["refreshToken"] == "<redacted>"
    assert login["userSessionToken"] == "<redacted>"
    assert login["__typename"] == "MobileLoginResponse"
    assert redacted["variables"]["password"] == "<redacted>"
    assert redacted["variables"]["otpCode"] == "<redacted>"
    assert redacted["variables"]["email"] == "user@example.com"
    assert redacted["headers"]["U-Sess"] == "<redacted>"
    assert redacted["headers"]["Accept"] == "application/json"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
