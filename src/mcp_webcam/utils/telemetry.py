"""Tracing for the dispatcher and executor.

Spans come from the OpenTelemetry API and are no-ops until
:func:`configure_telemetry` installs an SDK provider (``mcp-webcam[otel]``).
Spans never go to stdout: without an OTLP endpoint they are printed to stderr.
"""

from __future__ import annotations

import sys

from opentelemetry import trace

ATTR_RPC_METHOD = "rpc.method"
ATTR_RPC_REQUEST_ID = "rpc.jsonrpc.request_id"
ATTR_RPC_ERROR_CODE = "rpc.jsonrpc.error_code"
ATTR_TOOL_NAME = "mcp_webcam.tool.name"
ATTR_TOOL_MODE = "mcp_webcam.tool.mode"


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def configure_telemetry(service_name: str, otlp_endpoint: str | None = None) -> None:
    """Install a tracer provider exporting to *otlp_endpoint*, or to stderr.

    Raises
    ------
    ImportError
        If the SDK or, for OTLP, the exporter package is missing.
    """
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = "opentelemetry-sdk is required; install with: pip install mcp-webcam[otel]"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if otlp_endpoint is None:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    else:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        except ImportError as exc:
            msg = (
                "opentelemetry-exporter-otlp is required for OTLP export; "
                "install with: pip install mcp-webcam[otel]"
            )
            raise ImportError(msg) from exc
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))

    trace.set_tracer_provider(provider)
