"""
Release Tour Observability Module.

Provides OpenTelemetry-based metrics for monitoring Go code executions.
Supports multiple exporter backends (Prometheus, OTLP, Console).
"""

from releasetour.observability.metrics import (
    # Initialization
    init_metrics,
    shutdown_metrics,
    is_initialized,
    get_meter_provider,
    get_meter,
    ExporterType,
    # Execution metrics
    record_execution,
    record_execution_started,
    record_execution_finished,
    # Toolchain metrics
    update_toolchains_available,
    # Context managers
    ExecutionTimer,
)

__all__ = [
    "init_metrics",
    "shutdown_metrics",
    "is_initialized",
    "get_meter_provider",
    "get_meter",
    "ExporterType",
    "record_execution",
    "record_execution_started",
    "record_execution_finished",
    "update_toolchains_available",
    "ExecutionTimer",
]
