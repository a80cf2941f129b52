"""Prometheus metrics for Governor.

Provides counters and histograms for guardrail decisions, audit writes,
queue dispatch and milestone scheduling.
"""

from prometheus_client import Counter, Histogram

# Guardrail metrics
GUARDRAIL_DECISIONS = Counter(
    "governor_guardrail_decisions_total",
    "Total number of guardrail evaluations",
    labelnames=["category", "decision"],
)

HARD_LIMIT_VIOLATIONS = Counter(
    "governor_hard_limit_violations_total",
    "Total number of hard-limit checks that reported a violation",
    labelnames=["limit"],
)

# Audit metrics
AUDIT_WRITES = Counter(
    "governor_audit_writes_total",
    "Audit entries written to the sink",
    labelnames=["kind"],
)

AUDIT_WRITE_FAILURES = Counter(
    "governor_audit_write_failures_total",
    "Audit entries that failed to write",
    labelnames=["kind"],
)

AUDIT_DROPPED = Counter(
    "governor_audit_dropped_total",
    "Audit entries dropped because the queue was full",
    labelnames=["kind"],
)

# Dispatch metrics
DISPATCH_TASK_RESULTS = Counter(
    "governor_dispatch_task_results_total",
    "Per-task dispatch outcomes",
    labelnames=["outcome"],
)

DISPATCH_BATCH_LATENCY = Histogram(
    "governor_dispatch_batch_latency_seconds",
    "Wall-clock duration of one dispatch batch",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# Schedule metrics
MILESTONE_RUNS = Counter(
    "governor_milestone_runs_total",
    "Scheduled milestone runs",
    labelnames=["outcome"],
)
