"""Span ids of the active traced operation, for log correlation."""

from __future__ import annotations

from contextvars import ContextVar, Token


# (trace_id, span_id) as OpenTelemetry hex strings, set while a span is active
_active_span_ids: ContextVar[tuple[str, str] | None] = ContextVar("content_search_span_ids", default=None)


def get_trace_context() -> dict[str, str]:
    """Return the active span's ``trace_id`` and ``span_id``, or ``{}`` outside any span."""
    ids = _active_span_ids.get()
    if ids is None:
        return {}
    trace_id, span_id = ids
    return {"trace_id": trace_id, "span_id": span_id}


def bind_span_ids(trace_id: int, span_id: int) -> Token[tuple[str, str] | None]:
    """Expose a span's ids to log records until the returned token is reset."""
    return _active_span_ids.set((format(trace_id, "032x"), format(span_id, "016x")))


def reset_span_ids(token: Token[tuple[str, str] | None]) -> None:
    _active_span_ids.reset(token)
