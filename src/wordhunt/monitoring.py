"""Monitoring configuration for the progress engine."""
from prometheus_client import Counter, Histogram, start_http_server

# Learning metrics
answers_recorded = Counter(
    "wordhunt_answers_recorded_total",
    "Total number of answers recorded",
    ["result"],
)

box_transitions = Counter(
    "wordhunt_box_transitions_total",
    "Total number of Leitner box moves",
    ["direction"],
)

# Session metrics
sessions_completed = Counter(
    "wordhunt_sessions_completed_total",
    "Total number of game sessions completed",
    ["difficulty"],
)

session_duration = Histogram(
    "wordhunt_session_duration_seconds",
    "Duration of game sessions in seconds",
    ["difficulty"],
    buckets=[30, 60, 120, 300, 600, 1800],  # 30s, 1min, 2min, 5min, 10min, 30min
)

sessions_pruned = Counter(
    "wordhunt_sessions_pruned_total",
    "Total number of session logs removed by retention",
)

# Storage metrics
corrupt_reads = Counter(
    "wordhunt_corrupt_reads_total",
    "Total number of stored values that could not be decoded",
    ["kind"],
)

storage_errors = Counter(
    "wordhunt_storage_errors_total",
    "Total number of failed store writes",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
