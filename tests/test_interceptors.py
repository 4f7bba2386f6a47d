import logging
from types import SimpleNamespace

import pytest

from fetchconf.networking.errors import ErrorResponse, HttpClientError
from fetchconf.networking.interceptors import (
    Interceptor,
    LoggingInterceptor,
    get_handler,
    is_success_response,
    reject_on_error,
    response_status,
)


def test_reject_on_error_raises_with_same_response_object():
    response = {"ok": False, "status": 404}

    with pytest.raises(ErrorResponse) as excinfo:
        reject_on_error(response)

    assert excinfo.value.response is response
    assert excinfo.value.status == 404
    assert isinstance(excinfo.value, HttpClientError)


def test_reject_on_error_passes_success_through_unchanged():
    response = {"ok": True, "status": 200}

    assert reject_on_error(response) is response


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_2xx_statuses_are_success(status):
    assert is_success_response(SimpleNamespace(status_code=status))


@pytest.mark.parametrize("status", [100, 199, 300, 302, 404, 500])
def test_statuses_outside_2xx_are_rejected(status):
    response = SimpleNamespace(status_code=status, ok=True)

    with pytest.raises(ErrorResponse) as excinfo:
        reject_on_error(response)

    assert excinfo.value.response is response


def test_ok_false_without_status_is_rejected():
    response = SimpleNamespace(ok=False)

    with pytest.raises(ErrorResponse) as excinfo:
        reject_on_error(response)

    assert excinfo.value.status is None


def test_response_without_indicators_passes_through():
    response = object()

    assert reject_on_error(response) is response


def test_response_status_prefers_status_code_and_ignores_bools():
    assert response_status(SimpleNamespace(status_code=201, status=500)) == 201
    assert response_status({"status": True}) is None
    assert response_status({}) is None


def test_get_handler_skips_missing_and_non_callable_slots():
    handler = Interceptor(response=reject_on_error)

    assert get_handler(handler, "response") is reject_on_error
    assert get_handler(handler, "request") is None
    assert get_handler(SimpleNamespace(request="nope"), "request") is None
    assert get_handler(object(), "response_error") is None


def test_logging_interceptor_logs_and_passes_values(caplog):
    interceptor = LoggingInterceptor()
    request = SimpleNamespace(method="GET", url="http://example.com/a")
    response = SimpleNamespace(status_code=200, url="http://example.com/a")

    with caplog.at_level(logging.DEBUG):
        assert interceptor.request(request) is request
        assert interceptor.response(response) is response

    assert "HTTP request: GET http://example.com/a" in caplog.text
    assert "HTTP response: 200 http://example.com/a" in caplog.text


def test_logging_interceptor_reraises_errors(caplog):
    interceptor = LoggingInterceptor()
    error = ErrorResponse(SimpleNamespace(status_code=500), status=500)

    with caplog.at_level(logging.DEBUG):
        with pytest.raises(ErrorResponse):
            interceptor.response_error(error)

    assert "HTTP error: ErrorResponse" in caplog.text
