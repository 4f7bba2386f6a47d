# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
from unittest.mock import Mock, patch

from fetchconf.networking.client import HttpClient
from fetchconf.networking.config import HttpClientConfiguration
from fetchconf.networking.errors import ErrorResponse


def _mock_response(
    *,
    content: bytes = b"",
    status: int = 200,
    url: str = "http://example.com",
    reason: str = "OK",
):
    response = Mock()
    response.content = content
    response.status_code = status
    response.ok = status < 400
    response.url = url
    response.reason = reason
    response.elapsed.total_seconds.return_value = 0.1
    response.headers = {"Content-Type": "application/json"}
    return response


def test_get_404_is_ok_result_without_rejection():
    client = HttpClient(HttpClientConfiguration())

    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = _mock_response(
            content=b"not found",
            status=404,
            reason="Not Found",
        )
        result = client.get("http://example.com/missing")

    assert result.ok
    assert result.value.content == b"not found"
    assert result.meta["status_code"] == 404
    assert result.meta["reason"] == "Not Found"


def test_get_500_is_err_result_with_standard_configuration():
    client = HttpClient(
        HttpClientConfiguration().use_standard_configuration()
    )
    response = _mock_response(
        content=b"server error",
        status=500,
        reason="Internal Server Error",
    )

    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response
        result = client.get("http://example.com/error")

    assert not result.ok
    assert isinstance(result.error, ErrorResponse)
    assert result.error.response is response
    assert result.error.status == 500
    assert result.meta["status_code"] == 500
    assert result.meta["reason"] == "Internal Server Error"


def test_get_302_is_rejected_even_though_requests_reports_ok():
    client = HttpClient(HttpClientConfiguration().reject_error_responses())
    response = _mock_response(status=302, reason="Found")
    assert response.ok

    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response
        result = client.get("http://example.com/redirect")

    assert not result.ok
    assert isinstance(result.error, ErrorResponse)
    assert result.meta["status_code"] == 302
    assert result.meta["reason"] == "Found"


def test_get_204_passes_with_standard_configuration():
    client = HttpClient(
        HttpClientConfiguration().use_standard_configuration()
    )
    response = _mock_response(status=204, reason="No Content")

    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response
        result = client.get("http://example.com/empty")

    assert result.ok
    assert result.value is response
