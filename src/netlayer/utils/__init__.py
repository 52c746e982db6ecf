r"""Utilities shared by the network layer: error snapshots and
structured logging."""

from __future__ import annotations

__all__ = [
    "ErrorSnapshot",
    "StructuredFormatter",
    "TransportErrorCode",
    "classify_transport_error",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

from netlayer.utils.error_snapshot import (
    ErrorSnapshot,
    TransportErrorCode,
    classify_transport_error,
)
from netlayer.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
