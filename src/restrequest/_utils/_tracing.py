from contextlib import contextmanager
from typing import Generator

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from ..models.request import PreparedRequest

tracer = trace.get_tracer("restrequest")


@contextmanager
def request_span(
    request: PreparedRequest, name: str = "restrequest.send"
) -> Generator[Span, None, None]:
    """Open a client span for one exchange; exceptions mark it as failed."""
    with tracer.start_as_current_span(name, kind=SpanKind.CLIENT) as span:
        span.set_attribute("http.request.method", request.method.value)
        span.set_attribute("url.full", str(request.url))
        span.set_attribute("server.address", request.host)
        yield span


def record_status(span: Span, status_code: int) -> None:
    span.set_attribute("http.response.status_code", status_code)
    if status_code >= 400:
        span.set_status(Status(StatusCode.ERROR))
