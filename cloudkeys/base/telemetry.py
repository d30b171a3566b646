"""
OpenTelemetry spans around remote calls.

Every call into the key-manager service runs inside :func:`traced_call`,
which opens one span named ``<resource>.<operation>`` (e.g.
``secret.list``) and marks it OK or ERROR on every exit path. Cloudkeys
only depends on ``opentelemetry-api``; without a configured tracer
provider the spans are no-ops, so exporting is up to the application::

    with traced_call("secret", "list") as span:
        secrets = list(conn.key_manager.secrets(name=name))
        span.set_attribute("cloudkeys.secret_count", len(secrets))
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

from cloudkeys.base.exceptions import error_kind


def get_tracer() -> trace.Tracer:
    """Get the OpenTelemetry tracer for Cloudkeys spans."""
    return trace.get_tracer("cloudkeys")


@contextmanager
def traced_call(resource: str, operation: str) -> Iterator[Span]:
    """Trace the wrapped block as one remote call.

    On failure the exception is recorded on the span and re-raised
    unchanged.
    """
    with get_tracer().start_as_current_span(
        f"{resource}.{operation}",
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.set_attribute("cloudkeys.resource", resource)
        span.set_attribute("cloudkeys.operation", operation)
        try:
            yield span
        except BaseException as exc:
            span.record_exception(exc)
            span.set_status(StatusCode.ERROR, str(exc))
            kind = error_kind(exc)
            if kind is not None:
                span.set_attribute("cloudkeys.error_kind", kind.value)
            raise
        span.set_status(StatusCode.OK)


__all__ = ["get_tracer", "traced_call"]
