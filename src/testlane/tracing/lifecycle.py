"""Tracer provider setup and tracing helpers."""

from contextlib import contextmanager
from pathlib import Path
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from testlane.tracing.exporters import JsonlSpanExporter


_exporter: JsonlSpanExporter | None = None


def init_tracing(
    *,
    service_name: str = "testlane",
    output_path: Path | str = "traces.jsonl",
) -> None:
    """Install a tracer provider streaming spans to ``output_path``.

    OpenTelemetry only accepts one global provider per process, so later
    calls only redirect the output file.
    """
    global _exporter

    if _exporter is not None:
        _exporter.output_path = Path(output_path)
        _exporter.output_path.parent.mkdir(parents=True, exist_ok=True)
        _exporter.output_path.write_text("")
        return

    _exporter = JsonlSpanExporter(output_path)
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(SimpleSpanProcessor(_exporter))
    trace.set_tracer_provider(provider)


def get_tracer(name: str = "testlane") -> trace.Tracer:
    """Get a tracer instance for creating spans."""
    return trace.get_tracer(name)


@contextmanager
def trace_step(name: str, attributes: dict[str, Any] | None = None):
    """Trace a custom step inside test code.

    The span nests under the span of the running attempt.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)
        yield span
