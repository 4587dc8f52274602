from __future__ import annotations

from typing import Any

import httpx
import pytest

from apps.ui import api_client
from apps.ui.api_client import ApiError
from apps.ui.main import validate_signup

BASE_URL = "http://api.test"


def _install(monkeypatch: pytest.MonkeyPatch, status_code: int, payload: Any) -> list[tuple[str, str, Any]]:
    calls: list[tuple[str, str, Any]] = []

    def fake_request(method, url, params=None, json=None, timeout=None):  # noqa: ANN001
        calls.append((method, url, params if params is not None else json))
        return httpx.Response(status_code, json=payload, request=httpx.Request(method, url))

    monkeypatch.setattr("apps.ui.api_client.httpx.request", fake_request)
    return calls


def test_fetch_analysis_parses_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install(
        monkeypatch,
        200,
        {
            "sector_allocation": {"Technology": 100.0},
            "top_sectors": ["Technology"],
            "underrepresented_sectors": ["Healthcare"],
            "recommendations": [],
        },
    )

    analysis = api_client.fetch_analysis(BASE_URL, "randy")

    assert calls == [("GET", f"{BASE_URL}/portfolio/analysis", {"username": "randy"})]
    assert analysis.top_sectors == ["Technology"]


def test_login_returns_false_on_401(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, 401, {"detail": "Invalid username or password"})

    assert api_client.login(BASE_URL, "randy", "nope") is False


def test_error_detail_is_surfaced(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, 404, {"detail": "No data found for symbol ZZZZ"})

    with pytest.raises(ApiError, match="No data found for symbol ZZZZ") as excinfo:
        api_client.add_holding(BASE_URL, "randy", "ZZZZ", 1, 1)
    assert excinfo.value.status_code == 404


def test_transport_failure_raises_api_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_request(method, url, params=None, json=None, timeout=None):  # noqa: ANN001
        raise httpx.ConnectError("offline")

    monkeypatch.setattr("apps.ui.api_client.httpx.request", fake_request)

    with pytest.raises(ApiError, match="Failed to call API"):
        api_client.fetch_holdings(BASE_URL, "randy")


@pytest.mark.parametrize(
    ("form", "expected"),
    [
        (("randy", "randy@example.com", "secret1", "secret1"), None),
        (("r!", "randy@example.com", "secret1", "secret1"), "Username must be"),
        (("randy", "randy@", "secret1", "secret1"), "valid email"),
        (("randy", "randy@example.com", "123", "123"), "at least 6"),
        (("randy", "randy@example.com", "secret1", "secret2"), "do not match"),
    ],
)
def test_validate_signup(form: tuple[str, str, str, str], expected: str | None) -> None:
    problem = validate_signup(*form)
    if expected is None:
        assert problem is None
    else:
        assert expected in problem
