"""Optional caller-supplied log sink.

Callers can hand the library an object with ``info``/``error`` methods to
receive the same events the library writes to stdlib logging. Both methods
are optional; a missing sink or a missing method only removes observability.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

LogMetadata = dict[str, Any]


class LogSink(Protocol):
    """Protocol for caller-side event sinks."""

    def info(self, tag: str, message: str, metadata: LogMetadata | None = None) -> None: ...

    def error(
        self, tag: str, error: BaseException | str, metadata: LogMetadata | None = None
    ) -> None: ...


def sink_info(
    sink: LogSink | None, tag: str, message: str, metadata: LogMetadata | None = None
) -> None:
    """Forward an info event to ``sink`` if it accepts one."""
    method = getattr(sink, "info", None)
    if not callable(method):
        return
    try:
        method(tag, message, metadata or {})
    except Exception as e:
        logger.debug("Log sink info() failed", extra={"tag": tag, "error": str(e)})


def sink_error(
    sink: LogSink | None,
    tag: str,
    error: BaseException | str,
    metadata: LogMetadata | None = None,
) -> None:
    """Forward an error event to ``sink`` if it accepts one."""
    method = getattr(sink, "error", None)
    if not callable(method):
        return
    try:
        method(tag, error, metadata or {})
    except Exception as e:
        logger.debug("Log sink error() failed", extra={"tag": tag, "error": str(e)})
