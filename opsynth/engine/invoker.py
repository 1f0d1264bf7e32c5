"""
Invoker - configure the transport, call the operation, canonicalize the result.

Invocation flow:
1. Apply TransportConfig to the shared transport (base URL, debug flag,
   default headers one by one; a failing header is logged and skipped)
2. Call the operation synchronously with the bound positional arguments
3. Canonicalize the raw result: serialize to JSON text, parse it back.
   If either step fails the raw result is returned unchanged.

Any exception from the operation, or from setting the base URL or debug
flag, surfaces as InvocationFailed carrying the innermost cause text only. No retries are performed.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping
from urllib.parse import urlencode

from opsynth.errors import InvocationFailed
from opsynth.schemas import OperationHandle, RequestDescriptor
from opsynth.surface import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportConfig:
    """
    Settings applied to the transport before each call.

    Attributes:
        base_url: Base URL of the target API
        headers: Default headers, applied individually
        debug: Verbose transport logging; forced on for dispatched calls
    """
    base_url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    debug: bool = True

    @classmethod
    def from_descriptor(cls, descriptor: RequestDescriptor) -> "TransportConfig":
        return cls(base_url=descriptor.validate_url(), headers=dict(descriptor.headers))


def apply_transport(
    transport: Transport,
    config: TransportConfig,
    operation: str | None = None,
) -> None:
    """
    Apply a TransportConfig to the shared transport.

    Header failures are logged per header and never abort the rest.

    Raises:
        InvocationFailed: If the base URL or debug flag cannot be applied
    """
    try:
        transport.set_base_url(config.base_url)
        transport.set_debug(config.debug)
    except Exception as e:
        message = root_cause_message(e)
        logger.error(f"Failed to configure transport: {message}", extra={"operation": operation})
        raise InvocationFailed(message, operation=operation) from e
    for name, value in config.headers.items():
        try:
            logger.debug(f"Adding header: {name}")
            transport.add_default_header(name, value)
        except Exception as e:
            logger.error(f"Failed to add header {name}: {e}")


def _jsonable(obj: Any) -> Any:
    """json.dumps default hook for generated models and common value types."""
    for method in ("to_dict", "model_dump"):
        fn = getattr(obj, method, None)
        if callable(fn):
            return fn()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, bytes):
        return obj.decode("utf-8")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_structured_text(result: Any) -> str:
    """Serialize a raw result to JSON text."""
    return json.dumps(result, default=_jsonable)


def from_structured_text(text: str) -> Any:
    """Parse JSON text back into plain dicts, lists and scalars."""
    return json.loads(text)


def canonicalize(result: Any) -> Any:
    """
    Best-effort normalization of a raw result into plain JSON values.

    Returns the raw result unchanged when the round-trip fails.
    """
    try:
        text = to_structured_text(result)
    except Exception as e:
        logger.debug(f"Result not serializable, returning raw: {e}")
        return result
    try:
        return from_structured_text(text)
    except Exception as e:
        logger.debug(f"Result not parseable, returning raw: {e}")
        return result


def root_cause_message(error: BaseException) -> str:
    """
    Text of the innermost cause of an exception chain.

    Falls back to the immediate exception's text, then its class name.
    """
    seen = {id(error)}
    current = error
    while True:
        nxt = current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            break
        seen.add(id(nxt))
        current = nxt

    for candidate in (current, error):
        text = str(candidate)
        if text:
            return text
    return type(error).__name__


def invoke(
    handle: OperationHandle,
    args: tuple[Any, ...],
    transport: Transport,
    config: TransportConfig,
    query_params: Mapping[str, str] | None = None,
) -> Any:
    """
    Configure the transport and invoke an operation.

    Args:
        handle: Resolved operation handle
        args: Bound positional arguments, in declared order
        transport: Shared transport of the loaded surface
        config: Transport settings for this call
        query_params: Only used to log the expected request URL

    Returns:
        The canonicalized result (or the raw result if canonicalization fails)

    Raises:
        InvocationFailed: If the transport cannot be configured or the
                          operation raises
    """
    apply_transport(transport, config, operation=handle.name)

    if query_params:
        logger.info(f"Expected request URL: {config.base_url}?{urlencode(dict(query_params))}")
    logger.info(f"Invoking operation: {handle.name}")

    try:
        raw = handle.fn(*args)
    except Exception as e:
        message = root_cause_message(e)
        logger.error(f"API call failed: {message}", extra={"operation": handle.name})
        raise InvocationFailed(message, operation=handle.name) from e

    logger.info(f"Raw API response: {raw!r}")
    return canonicalize(raw)
