"""Tests for HTTP transport wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from asanakit.clients.http import HTTPResponse, request
from asanakit.errors import TimeoutError, TransportError


def _mock_response(
    status_code: int = 200,
    text: str = "",
    headers: dict[str, str] | None = None,
    json_value: object = None,
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = "OK"
    response.text = text
    response.headers = headers or {}
    response.json.return_value = json_value
    response.elapsed = MagicMock(total_seconds=lambda: 0.1)
    return response


class TestHTTPResponse:
    """Tests for HTTPResponse dataclass."""

    def test_ok_true_for_200(self):
        response = HTTPResponse(
            status_code=200,
            body='{"data": []}',
            json={"data": []},
            headers={"content-type": "application/json"},
        )
        assert response.ok is True

    def test_ok_true_for_201(self):
        response = HTTPResponse(status_code=201, body='{"data": {}}', json={"data": {}}, headers={})
        assert response.ok is True

    def test_ok_false_for_401(self):
        response = HTTPResponse(status_code=401, body="", json=None, headers={})
        assert response.ok is False

    def test_ok_false_for_500(self):
        response = HTTPResponse(status_code=500, body="Internal error", json=None, headers={})
        assert response.ok is False


class TestRequest:
    """Tests for request function."""

    def test_successful_get_request(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.return_value = _mock_response(
            text='{"data": []}',
            headers={"content-type": "application/json; charset=UTF-8"},
            json_value={"data": []},
        )

        result = request(mock_client, "get", "https://app.asana.com/api/1.0/tags")

        assert result.status_code == 200
        assert result.ok is True
        assert result.json == {"data": []}
        assert result.reason == "OK"
        assert result.elapsed_ms == 100.0
        mock_client.request.assert_called_once_with(
            method="GET",
            url="https://app.asana.com/api/1.0/tags",
            headers=None,
            timeout=httpx.USE_CLIENT_DEFAULT,
        )

    def test_query_params(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.return_value = _mock_response()

        request(
            mock_client,
            "GET",
            "https://app.asana.com/api/1.0/tasks",
            params={"workspace": "1", "assignee": "me"},
        )

        _, kwargs = mock_client.request.call_args
        assert kwargs["params"] == {"workspace": "1", "assignee": "me"}

    def test_put_with_json_body(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.return_value = _mock_response()

        request(
            mock_client,
            "PUT",
            "https://app.asana.com/api/1.0/tasks/1",
            json_body={"data": {"notes": "n"}},
        )

        mock_client.request.assert_called_once_with(
            method="PUT",
            url="https://app.asana.com/api/1.0/tasks/1",
            headers=None,
            timeout=httpx.USE_CLIENT_DEFAULT,
            json={"data": {"notes": "n"}},
        )

    def test_form_keys_sorted(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.return_value = _mock_response()

        request(
            mock_client,
            "POST",
            "https://app.asana.com/api/1.0/tasks",
            form={"workspace": "1", "assignee": "me", "name": "Docs"},
        )

        _, kwargs = mock_client.request.call_args
        assert list(kwargs["data"]) == ["assignee", "name", "workspace"]
        assert "json" not in kwargs

    def test_json_and_form_are_exclusive(self):
        mock_client = MagicMock(spec=httpx.Client)

        with pytest.raises(ValueError):
            request(mock_client, "POST", "https://x", json_body={}, form={"a": "b"})

        mock_client.request.assert_not_called()

    def test_custom_timeout(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.return_value = _mock_response()

        request(mock_client, "GET", "https://app.asana.com/api/1.0/users", timeout=5.0)

        _, kwargs = mock_client.request.call_args
        assert kwargs["timeout"] == 5.0

    def test_timeout_raises_timeout_error(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.side_effect = httpx.TimeoutException("Request timed out")

        with pytest.raises(TimeoutError) as exc_info:
            request(mock_client, "GET", "https://slow.example.com", timeout=2.0)

        assert "timed out" in str(exc_info.value)
        assert exc_info.value.timeout_seconds == 2.0

    def test_request_error_raises_transport_error(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.side_effect = httpx.RequestError("Connection refused")

        with pytest.raises(TransportError) as exc_info:
            request(mock_client, "GET", "https://unreachable.example.com")

        assert "Request failed" in str(exc_info.value)
        assert exc_info.value.method == "GET"

    def test_non_json_response(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.return_value = _mock_response(
            text="<html>Hello</html>", headers={"content-type": "text/html"}
        )

        result = request(mock_client, "GET", "https://example.com")

        assert result.json is None
        assert result.body == "<html>Hello</html>"
        mock_client.request.return_value.json.assert_not_called()

    def test_timeout_reports_client_default(self):
        mock_client = MagicMock(spec=httpx.Client)
        mock_client.request.side_effect = httpx.TimeoutException("Request timed out")
        mock_client.timeout = MagicMock(connect=30.0)

        with pytest.raises(TimeoutError) as exc_info:
            request(mock_client, "GET", "https://slow.example.com")

        assert exc_info.value.timeout_seconds == 30.0
        assert exc_info.value.context["timeout_seconds"] == 30.0
