r"""Unit tests for error snapshots and transport error classification."""

from __future__ import annotations

import dataclasses

import httpx
import pytest

from netlayer.utils.error_snapshot import (
    ErrorSnapshot,
    TransportErrorCode,
    classify_transport_error,
)

##############################################
#     Tests for classify_transport_error     #
##############################################


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (httpx.ConnectTimeout("timed out"), TransportErrorCode.TIMED_OUT),
        (httpx.ReadTimeout("timed out"), TransportErrorCode.TIMED_OUT),
        (httpx.WriteTimeout("timed out"), TransportErrorCode.TIMED_OUT),
        (httpx.PoolTimeout("timed out"), TransportErrorCode.TIMED_OUT),
        (
            httpx.ConnectError("[Errno -2] Name or service not known"),
            TransportErrorCode.CANNOT_FIND_HOST,
        ),
        (
            httpx.ConnectError("[Errno 8] nodename nor servname provided, or not known"),
            TransportErrorCode.CANNOT_FIND_HOST,
        ),
        (
            httpx.ConnectError("[Errno 101] Network is unreachable"),
            TransportErrorCode.NOT_CONNECTED_TO_INTERNET,
        ),
        (
            httpx.ConnectError("[Errno 111] Connection refused"),
            TransportErrorCode.CANNOT_CONNECT_TO_HOST,
        ),
        (
            httpx.RemoteProtocolError("Server disconnected without sending a response."),
            TransportErrorCode.NETWORK_CONNECTION_LOST,
        ),
        (httpx.ReadError("connection reset"), TransportErrorCode.NETWORK_CONNECTION_LOST),
        (httpx.WriteError("broken pipe"), TransportErrorCode.NETWORK_CONNECTION_LOST),
        (httpx.UnsupportedProtocol("ftp"), TransportErrorCode.UNKNOWN),
        (ValueError("boom"), TransportErrorCode.UNKNOWN),
    ],
)
def test_classify_transport_error(exc: BaseException, code: TransportErrorCode) -> None:
    """Test the classification of transport failures."""
    assert classify_transport_error(exc) is code


#####################################
#     Tests for ErrorSnapshot       #
#####################################


def test_error_snapshot_defaults() -> None:
    snapshot = ErrorSnapshot("boom")
    assert snapshot.description == "boom"
    assert snapshot.code is TransportErrorCode.UNKNOWN
    assert snapshot.domain == ""
    assert snapshot.error_type == ""
    assert str(snapshot) == "boom"


def test_error_snapshot_from_httpx_exception() -> None:
    """Test that the snapshot captures the essentials of a transport
    failure."""
    snapshot = ErrorSnapshot.from_exception(httpx.ReadTimeout("read timed out"))
    assert snapshot == ErrorSnapshot(
        description="read timed out",
        code=TransportErrorCode.TIMED_OUT,
        domain="httpx",
        error_type="ReadTimeout",
    )


def test_error_snapshot_from_builtin_exception() -> None:
    snapshot = ErrorSnapshot.from_exception(ValueError("bad value"))
    assert snapshot.description == "bad value"
    assert snapshot.domain == "builtins"
    assert snapshot.error_type == "ValueError"


def test_error_snapshot_from_exception_without_message() -> None:
    """Test that the class name is used when the exception has no
    message."""
    assert ErrorSnapshot.from_exception(RuntimeError()).description == "RuntimeError"


def test_error_snapshot_is_frozen() -> None:
    snapshot = ErrorSnapshot("boom")
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.description = "other"  # type: ignore[misc]
