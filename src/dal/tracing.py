from contextlib import contextmanager
from typing import Iterator, Optional

from common.config.env import get_env_bool


def trace_enabled() -> bool:
    """Return True when metadata reads should emit OTEL spans."""
    try:
        return get_env_bool("DAL_TRACE_QUERIES", False) is True
    except ValueError:
        return False


@contextmanager
def trace_metadata_operation(
    name: str,
    provider: str,
    schema: Optional[str] = None,
    table: Optional[str] = None,
) -> Iterator[None]:
    """Wrap a catalog read in an OTEL span when tracing is enabled."""
    if not trace_enabled():
        yield
        return

    from opentelemetry import trace

    tracer = trace.get_tracer("dal")
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("db.provider", provider)
        if schema:
            span.set_attribute("db.schema", schema)
        if table:
            span.set_attribute("db.table", table)
        try:
            yield
            span.set_attribute("db.status", "ok")
        except Exception:
            span.set_attribute("db.status", "error")
            raise
