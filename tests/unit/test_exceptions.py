r"""Unit tests for the error taxonomy."""

from __future__ import annotations

import pytest

from netlayer.exceptions import (
    AllRetriesFailedError,
    APIClientError,
    BodyEncodingError,
    ClientNetworkError,
    ClientRequestBuilderError,
    ClientResponseParseError,
    ClientUnexpectedError,
    ComponentsCreationError,
    DecodingError,
    FinalURLCreationError,
    InvalidBaseURLError,
    InvalidResponseError,
    InvalidURLError,
    MissingTokenError,
    NetworkError,
    NoDataError,
    RequestBuilderError,
    RequestFailedError,
    ResponseParserError,
    UnauthorizedError,
    UnexpectedStatusCodeError,
)
from netlayer.utils.error_snapshot import ErrorSnapshot, TransportErrorCode

##############################
#     Tests for families     #
##############################


@pytest.mark.parametrize(
    ("error", "family"),
    [
        (InvalidURLError(), NetworkError),
        (InvalidResponseError(), NetworkError),
        (UnauthorizedError(), NetworkError),
        (UnexpectedStatusCodeError(500), NetworkError),
        (RequestFailedError(ErrorSnapshot("boom")), NetworkError),
        (AllRetriesFailedError(InvalidURLError(), 1), NetworkError),
        (InvalidBaseURLError("x"), RequestBuilderError),
        (ComponentsCreationError("x"), RequestBuilderError),
        (FinalURLCreationError({}), RequestBuilderError),
        (BodyEncodingError(ErrorSnapshot("boom")), RequestBuilderError),
        (MissingTokenError(), RequestBuilderError),
        (NoDataError(), ResponseParserError),
        (DecodingError(ErrorSnapshot("boom")), ResponseParserError),
        (ClientNetworkError(InvalidURLError()), APIClientError),
        (ClientRequestBuilderError(MissingTokenError()), APIClientError),
        (ClientResponseParseError(NoDataError()), APIClientError),
        (ClientUnexpectedError(ErrorSnapshot("boom")), APIClientError),
    ],
)
def test_error_family(error: Exception, family: type[Exception]) -> None:
    """Test that every error belongs to its layer family."""
    assert isinstance(error, family)


def test_error_families_are_independent() -> None:
    """Test that the layer families do not overlap."""
    assert not issubclass(NetworkError, RequestBuilderError)
    assert not issubclass(RequestBuilderError, ResponseParserError)
    assert not issubclass(ResponseParserError, NetworkError)
    assert not issubclass(APIClientError, NetworkError)


#############################
#     Tests for network     #
#############################


def test_invalid_url_error_str() -> None:
    assert str(InvalidURLError()) == "The provided URL is invalid."


def test_invalid_response_error_str() -> None:
    assert str(InvalidResponseError()) == "Received an invalid response from the server."


def test_unauthorized_error() -> None:
    """Test UnauthorizedError keeps the response body."""
    error = UnauthorizedError(b"denied")
    assert error.status_code == 401
    assert error.body == b"denied"
    assert str(error) == "Unauthorized. Please check your credentials."


def test_unexpected_status_code_error_without_body() -> None:
    error = UnexpectedStatusCodeError(404)
    assert error.status_code == 404
    assert error.body == b""
    assert str(error) == "Server returned an unexpected status code: 404."


def test_unexpected_status_code_error_with_body() -> None:
    error = UnexpectedStatusCodeError(503, b"busy")
    assert str(error) == 'Server returned an unexpected status code: 503. Body: "busy"'


def test_unexpected_status_code_error_with_binary_body() -> None:
    error = UnexpectedStatusCodeError(500, b"\xff\xfe")
    assert str(error) == "Server returned an unexpected status code: 500. Body: (2 non-UTF8 bytes)"


def test_request_failed_error() -> None:
    snapshot = ErrorSnapshot("connection refused", code=TransportErrorCode.CANNOT_CONNECT_TO_HOST)
    error = RequestFailedError(snapshot)
    assert error.error is snapshot
    assert str(error) == "Request failed: connection refused"


def test_all_retries_failed_error() -> None:
    """Test AllRetriesFailedError renders the last error."""
    last_error = UnexpectedStatusCodeError(502)
    error = AllRetriesFailedError(last_error, total_attempts=4)
    assert error.last_error is last_error
    assert error.total_attempts == 4
    assert str(error) == (
        "All 4 retry attempts failed. Last error: "
        "Server returned an unexpected status code: 502."
    )


#####################################
#     Tests for request builder     #
#####################################


def test_invalid_base_url_error() -> None:
    error = InvalidBaseURLError("::bad::")
    assert error.base_url == "::bad::"
    assert str(error) == "The provided base URL string is invalid: ::bad::"


def test_final_url_creation_error_keeps_components() -> None:
    components = {"scheme": "https", "host": "api.test.com"}
    error = FinalURLCreationError(components)
    assert error.components == components
    assert "Components: {'scheme': 'https', 'host': 'api.test.com'}" in str(error)


def test_body_encoding_error() -> None:
    error = BodyEncodingError(ErrorSnapshot("not serializable"))
    assert error.error.description == "not serializable"
    assert str(error).endswith("Underlying error: not serializable")


def test_missing_token_error_str() -> None:
    assert "token provider was not provided" in str(MissingTokenError())


#####################################
#     Tests for response parser     #
#####################################


def test_no_data_error_str() -> None:
    assert str(NoDataError()) == "Data for a non-empty response type is empty"


def test_decoding_error_str() -> None:
    error = DecodingError(ErrorSnapshot("invalid json"))
    assert str(error) == "Failed to decode data: invalid json"


################################
#     Tests for API client     #
################################


def test_client_network_error_renders_nested_cause() -> None:
    """Test that the client error renders its cause recursively."""
    error = ClientNetworkError(
        AllRetriesFailedError(UnexpectedStatusCodeError(503, b"busy"), total_attempts=3)
    )
    assert str(error) == (
        "Network error: All 3 retry attempts failed. Last error: "
        'Server returned an unexpected status code: 503. Body: "busy"'
    )


def test_client_request_builder_error() -> None:
    cause = MissingTokenError()
    error = ClientRequestBuilderError(cause)
    assert error.error is cause
    assert str(error) == f"Request building error: {cause}"


def test_client_response_parse_error() -> None:
    error = ClientResponseParseError(NoDataError())
    assert str(error) == "Response parsing error: Data for a non-empty response type is empty"


def test_client_unexpected_error() -> None:
    error = ClientUnexpectedError(ErrorSnapshot("boom"))
    assert error.error == ErrorSnapshot("boom")
    assert str(error) == "Unexpected error: boom"
