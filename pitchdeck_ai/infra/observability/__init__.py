from .metrics import MetricsCollector, metrics, start_metrics_server, trace_operation

__all__ = ["MetricsCollector", "metrics", "start_metrics_server", "trace_operation"]
