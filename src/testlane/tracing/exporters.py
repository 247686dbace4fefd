"""Streaming file exporter for OpenTelemetry spans.

Writes spans to a JSONL file as they are finished. Worker threads end spans
concurrently, so writes are serialized.
"""

import json
import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult


logger = logging.getLogger(__name__)


class JsonlSpanExporter(SpanExporter):
    """Exports spans to a file in JSONL format as they are received."""

    def __init__(self, output_path: Path | str) -> None:
        self.output_path = Path(output_path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text("")
        self._lock = threading.Lock()

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Append a batch of spans to the file."""
        lines = [json.dumps(self._span_to_dict(span), default=str) + "\n" for span in spans]
        try:
            with self._lock, self.output_path.open("a", encoding="utf-8") as f:
                f.writelines(lines)
        except OSError:
            logger.exception("Failed to export spans to %s", self.output_path)
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        """Nothing is held open between exports."""

    def _span_to_dict(self, span: ReadableSpan) -> dict[str, Any]:
        return {
            "traceId": format(span.context.trace_id, "032x"),
            "spanId": format(span.context.span_id, "016x"),
            "parentSpanId": format(span.parent.span_id, "016x") if span.parent else None,
            "name": span.name,
            "startTimeUnixNano": span.start_time,
            "endTimeUnixNano": span.end_time,
            "attributes": dict(span.attributes or {}),
            "status": {"code": span.status.status_code.name if span.status else "UNSET"},
            "events": [
                {
                    "name": e.name,
                    "timeUnixNano": e.timestamp,
                    "attributes": dict(e.attributes or {}),
                }
                for e in (span.events or [])
            ],
        }
