r"""Unit tests for network request and response logging."""

from __future__ import annotations

import logging
from unittest.mock import Mock

import httpx
import pytest

from netlayer.exceptions import RequestFailedError, UnexpectedStatusCodeError
from netlayer.network_logger import DefaultNetworkLogger, curl_command
from netlayer.utils.error_snapshot import ErrorSnapshot

LOGGER_NAME = "tests.network_logger"
TEST_URL = "https://api.example.com/users"


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


##################################
#     Tests for curl_command     #
##################################


def test_curl_command_get() -> None:
    request = httpx.Request("GET", TEST_URL, headers={"Accept": "application/json"})
    assert curl_command(request) == f"curl '{TEST_URL}' -H 'accept: application/json'"


def test_curl_command_query_parameters() -> None:
    request = httpx.Request("GET", TEST_URL, params={"q": "ada"})
    assert curl_command(request) == f"curl '{TEST_URL}?q=ada'"


def test_curl_command_post_with_json_body() -> None:
    request = httpx.Request(
        "POST", TEST_URL, headers={"Content-Type": "application/json"}, content=b'{"name":"X"}'
    )
    command = curl_command(request)
    assert command.startswith(f"curl '{TEST_URL}' -X POST")
    assert "-H 'content-type: application/json'" in command
    assert command.endswith("""-d '{"name":"X"}'""")


def test_curl_command_escapes_single_quotes() -> None:
    request = httpx.Request("PUT", TEST_URL, content=b"it's")
    assert curl_command(request).endswith("-d 'it'\\''s'")


def test_curl_command_binary_body() -> None:
    request = httpx.Request("POST", TEST_URL, content=b"\xff\xfe\x00")
    assert curl_command(request).endswith("--data-binary '(3 bytes of non-UTF8 data)'")


def test_curl_command_skips_host_header() -> None:
    assert "host:" not in curl_command(httpx.Request("DELETE", TEST_URL))


##########################################
#     Tests for DefaultNetworkLogger     #
##########################################


def test_default_network_logger_default_logger() -> None:
    assert "netlayer.network_logger" in repr(DefaultNetworkLogger())


def test_log_request(logger: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    """Test that a request is logged with its structured fields."""
    request = httpx.Request("POST", TEST_URL, content=b'{"name":"X"}')
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_request(request)

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.DEBUG
    assert record.event == "request"
    assert record.url == TEST_URL
    assert record.method == "POST"
    assert record.curl == curl_command(request)
    message = record.getMessage()
    assert "--- [Request] --->" in message
    assert f"URL: {TEST_URL}" in message
    assert 'Body: {"name":"X"}' in message


def test_log_request_disabled_level(
    logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_request(httpx.Request("GET", TEST_URL))
    assert caplog.records == []


def test_log_request_custom_level(
    logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger, level=logging.INFO).log_request(
            httpx.Request("GET", TEST_URL)
        )
    assert [record.levelno for record in caplog.records] == [logging.INFO]


def test_log_request_never_raises(logger: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    """Test that logging failures are reported instead of raised."""
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_request(Mock(spec=httpx.Request))
    assert [record.getMessage() for record in caplog.records] == ["Failed to log request"]
    assert caplog.records[0].levelno == logging.WARNING


def test_log_response_success(logger: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    request = httpx.Request("GET", TEST_URL)
    response = httpx.Response(200, content=b'{"id":1}', request=request)
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_response(response, b'{"id":1}', None, request)

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.DEBUG
    assert record.event == "response"
    assert record.status_code == 200
    message = record.getMessage()
    assert "<--- [Response] ---" in message
    assert "Status Code: 200" in message
    assert 'Body: {"id":1}' in message
    assert "Error:" not in message


def test_log_response_failed_status(
    logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that failed responses are logged at error level."""
    request = httpx.Request("GET", TEST_URL)
    response = httpx.Response(503, request=request)
    error = UnexpectedStatusCodeError(503)
    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_response(response, b"", error, request)

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert record.status_code == 503
    assert "Body: None" in record.getMessage()
    assert f"Error: {error}" in record.getMessage()


def test_log_response_transport_error(
    logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    request = httpx.Request("GET", TEST_URL)
    error = RequestFailedError(ErrorSnapshot("connection refused"))
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_response(None, None, error, request)

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert record.error == "Request failed: connection refused"
    assert f"Request URL: {TEST_URL}" in record.getMessage()


def test_log_response_non_http_response(
    logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_response(
            None, None, None, httpx.Request("GET", TEST_URL)
        )

    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING
    assert "Received a non-HTTP response" in caplog.records[0].getMessage()


def test_log_response_binary_body(
    logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    request = httpx.Request("GET", TEST_URL)
    response = httpx.Response(200, content=b"\x89PNG\xff", request=request)
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        DefaultNetworkLogger(logger).log_response(response, b"\x89PNG\xff", None, request)
    assert "Body: (5 bytes of non-UTF8 data)" in caplog.records[0].getMessage()
