from testlane.tracing.lifecycle import get_tracer, init_tracing, trace_step

__all__ = [
    "get_tracer",
    "init_tracing",
    "trace_step",
]
