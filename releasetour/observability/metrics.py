"""
OpenTelemetry metrics definitions for Release Tour.

This module provides metrics instrumentation using OpenTelemetry SDK,
with configurable exporter backends (Prometheus, OTLP, Console, etc.).
All recording helpers are no-ops until ``init_metrics`` has been called.
"""

import time
from typing import Optional
from enum import Enum


class ExporterType(str, Enum):
    """Supported metrics exporter types."""
    PROMETHEUS = "prometheus"
    OTLP = "otlp"
    OTLP_HTTP = "otlp_http"
    CONSOLE = "console"
    NONE = "none"  # For testing or disabled metrics


# Global state
_meter = None
_meter_provider = None
_initialized = False

# Metric instruments
_execution_counter = None
_execution_duration = None
_execution_in_progress = None
_toolchains_available = None

# State for observable gauges
_current_toolchains_available: int = 0


def _toolchains_available_callback(options):
    """Callback for available toolchains observable gauge."""
    from opentelemetry.metrics import Observation
    yield Observation(_current_toolchains_available)


def _create_exporter(
    exporter_type: ExporterType,
    **kwargs,
):
    """
    Create a metric reader based on the exporter type.

    Args:
        exporter_type: Type of exporter to create
        **kwargs: Additional arguments for the exporter
            - endpoint: OTLP endpoint URL
            - headers: OTLP headers dict
            - export_interval_millis: Export interval for periodic exporters

    Returns:
        A metric reader instance, or None for ``ExporterType.NONE``
    """
    from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader

    export_interval = kwargs.pop("export_interval_millis", 10000)

    if exporter_type == ExporterType.PROMETHEUS:
        from opentelemetry.exporter.prometheus import PrometheusMetricReader
        return PrometheusMetricReader()

    elif exporter_type == ExporterType.OTLP:
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
        exporter = OTLPMetricExporter(**kwargs)
        return PeriodicExportingMetricReader(
            exporter,
            export_interval_millis=export_interval,
        )

    elif exporter_type == ExporterType.OTLP_HTTP:
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
        exporter = OTLPMetricExporter(**kwargs)
        return PeriodicExportingMetricReader(
            exporter,
            export_interval_millis=export_interval,
        )

    elif exporter_type == ExporterType.CONSOLE:
        from opentelemetry.sdk.metrics.export import ConsoleMetricExporter
        exporter = ConsoleMetricExporter()
        return PeriodicExportingMetricReader(
            exporter,
            export_interval_millis=export_interval,
        )

    elif exporter_type == ExporterType.NONE:
        return None

    else:
        raise ValueError(f"Unknown exporter type: {exporter_type}")


def init_metrics(
    service_name: str = "releasetour",
    exporter_type: str | ExporterType = ExporterType.PROMETHEUS,
    **exporter_kwargs,
):
    """
    Initialize OpenTelemetry metrics with the specified exporter.

    Args:
        service_name: Name of the service for resource identification
        exporter_type: Exporter type ("prometheus", "otlp", "otlp_http", "console", "none")
        **exporter_kwargs: Additional arguments for the exporter

    Returns:
        The configured MeterProvider

    Example:
        # Metrics recorded but not exported (tests)
        init_metrics(exporter_type="none")

        # OTLP gRPC
        init_metrics(exporter_type="otlp", endpoint="http://localhost:4317")
    """
    global _meter, _meter_provider, _initialized
    global _execution_counter, _execution_duration, _execution_in_progress
    global _toolchains_available

    if _initialized:
        return _meter_provider

    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.resources import Resource, SERVICE_NAME

    if isinstance(exporter_type, str):
        exporter_type = ExporterType(exporter_type)

    resource = Resource.create({SERVICE_NAME: service_name})

    reader = _create_exporter(exporter_type, **exporter_kwargs)
    readers = [reader] if reader is not None else []

    # The provider is kept local to this module rather than installed as the
    # global OpenTelemetry provider, so it can be shut down and re-created.
    _meter_provider = MeterProvider(resource=resource, metric_readers=readers)
    _meter = _meter_provider.get_meter("releasetour.metrics", version="1.0.0")

    _execution_counter = _meter.create_counter(
        name="releasetour_execution_total",
        description="Total number of executions by version and status",
        unit="1",
    )

    _execution_duration = _meter.create_histogram(
        name="releasetour_execution_duration_seconds",
        description="Execution wall-clock duration in seconds",
        unit="s",
    )

    _execution_in_progress = _meter.create_up_down_counter(
        name="releasetour_execution_in_progress",
        description="Number of currently running child processes",
        unit="1",
    )

    _toolchains_available = _meter.create_observable_gauge(
        name="releasetour_toolchains_available",
        description="Number of runnable Go toolchains",
        unit="1",
        callbacks=[_toolchains_available_callback],
    )

    _initialized = True
    return _meter_provider


def shutdown_metrics() -> None:
    """Shutdown the meter provider and flush metrics."""
    global _meter_provider, _meter, _initialized
    global _execution_counter, _execution_duration, _execution_in_progress
    global _toolchains_available
    if _meter_provider is not None:
        _meter_provider.shutdown()
    _meter_provider = None
    _meter = None
    _execution_counter = None
    _execution_duration = None
    _execution_in_progress = None
    _toolchains_available = None
    _initialized = False


def is_initialized() -> bool:
    """Check if metrics have been initialized."""
    return _initialized


def get_meter_provider():
    """Get the current meter provider."""
    return _meter_provider


def get_meter():
    """Get the current meter instance."""
    return _meter


# =============================================================================
# Execution Metrics Helper Functions
# =============================================================================


def record_execution(version: str, status: str, duration: Optional[float] = None) -> None:
    """Record a finished execution. ``status`` is "success" or an error kind."""
    attributes = {"version": version or "unknown", "status": status}
    if _execution_counter is not None:
        _execution_counter.add(1, attributes)
    if duration is not None and _execution_duration is not None:
        _execution_duration.record(duration, {"version": version or "unknown"})


def record_execution_started() -> None:
    if _execution_in_progress is not None:
        _execution_in_progress.add(1)


def record_execution_finished() -> None:
    if _execution_in_progress is not None:
        _execution_in_progress.add(-1)


def update_toolchains_available(count: int) -> None:
    """Update the number of runnable toolchains."""
    global _current_toolchains_available
    _current_toolchains_available = count


# =============================================================================
# Context Managers
# =============================================================================


class ExecutionTimer:
    """Context manager tracking one running child process."""

    def __init__(self):
        self.start_time: Optional[float] = None

    def __enter__(self) -> "ExecutionTimer":
        self.start_time = time.time()
        record_execution_started()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is None:
            return
        record_execution_finished()
