"""Ingestion of raw gateway failures.

Gateway adapters, GraphQL clients and the transport layer fail in many
shapes: GatewayError exceptions, GraphQL error dicts, objects with a
``graphql_errors`` list, bare exceptions, plain strings. This module reduces
any of them, once, to one of the GatewayFailure variants so that the
classifier and the retry predicate never sniff shapes themselves.

This module provides:
- ingest_failure(): Reduce a raw failure to a GatewayFailure
- extract_message(): Best-effort technical message
- extract_status_code(): HTTP status carried by the failure
- extract_retryable(): Explicit retryability flag, if declared
- extract_category(): Category string carried by the failure
- has_network_indicator(): Network-layer failure detection
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .exceptions import GatewayError
from .models import (
    GatewayFailure,
    MessageFailure,
    NetworkFailure,
    OpaqueFailure,
    StructuredFailure,
    UnstructuredFailure,
)

# Keys, in lookup order, that may hold a GraphQL error list
_GRAPHQL_ERROR_KEYS = ("graphql_errors", "graphQLErrors")

# Keys, in lookup order, that may hold the gateway error code
_CODE_KEYS = ("juspayErrorCode", "code")


def _get(raw: Any, key: str) -> Any:
    """Read ``key`` from a mapping or an attribute of an object."""
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def _find_extensions(raw: Any) -> Mapping[str, Any] | None:
    extensions = _get(raw, "extensions")
    if isinstance(extensions, Mapping) and extensions:
        return extensions

    for key in _GRAPHQL_ERROR_KEYS:
        errors = _get(raw, key)
        if isinstance(errors, Sequence) and not isinstance(errors, str) and errors:
            nested = _get(errors[0], "extensions")
            if isinstance(nested, Mapping) and nested:
                return nested
    return None


def extract_message(raw: Any) -> str | None:
    """Best-effort technical message for a raw failure.

    Returns:
        The message, or None when the failure carries no text.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, GatewayError):
        return raw.message or None
    if isinstance(raw, Mapping):
        message = raw.get("message")
        return message if isinstance(message, str) and message else None
    if isinstance(raw, BaseException):
        text = str(raw)
        if text:
            return text
        # Bare TimeoutError() carries no text; its type is the message.
        if isinstance(raw, TimeoutError):
            return type(raw).__name__
        return None
    message = getattr(raw, "message", None)
    return message if isinstance(message, str) and message else None


def has_network_indicator(raw: Any, message: str | None = None) -> bool:
    """Check whether a failure happened at the network layer.

    True for ConnectionError instances, GatewayError(network=True), objects
    or dicts carrying a truthy ``network_error``/``networkError``, and
    messages containing "network".
    """
    if isinstance(raw, ConnectionError):
        return True
    if isinstance(raw, GatewayError) and raw.network:
        return True
    if _get(raw, "network_error") or _get(raw, "networkError"):
        return True
    if message is None:
        message = extract_message(raw)
    return message is not None and "network" in message


def extract_status_code(raw: Any) -> int | None:
    """HTTP status code carried by the failure, if any."""
    for key in ("status_code", "statusCode"):
        value = _get(raw, key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def extract_retryable(raw: Any) -> bool | None:
    """Explicit retryability declared by the failure, if any."""
    value = _get(raw, "retryable")
    return value if isinstance(value, bool) else None


def extract_category(raw: Any) -> str | None:
    """Category string carried by the failure (``error_category`` or ``category``)."""
    for key in ("error_category", "errorCategory", "category"):
        value = _get(raw, key)
        if value is None:
            continue
        # str-valued enums compare and format as their value
        return str(getattr(value, "value", value))
    return None


def _ingest_unstructured(raw: Any, message: str | None) -> UnstructuredFailure:
    if has_network_indicator(raw, message):
        return NetworkFailure(message=message or "")
    if message:
        return MessageFailure(text=message)
    return OpaqueFailure()


def ingest_failure(raw: Any) -> GatewayFailure:
    """Reduce a raw failure to a GatewayFailure variant.

    Structured metadata (an extensions mapping with an error code) always
    produces a StructuredFailure; its ``fallback`` holds the unstructured
    reading of the same failure for codes the table does not know.

    Args:
        raw: Anything a gateway call may raise or return as an error.

    Returns:
        StructuredFailure, NetworkFailure, MessageFailure or OpaqueFailure.
    """
    message = extract_message(raw)
    unstructured = _ingest_unstructured(raw, message)

    extensions = _find_extensions(raw)
    if extensions is not None:
        for key in _CODE_KEYS:
            code = extensions.get(key)
            if code:
                return StructuredFailure(
                    code=str(code),
                    extensions=dict(extensions),
                    message=message,
                    fallback=unstructured,
                )
    return unstructured
