"""
Prometheus metrics for htmlsoups.

Provides instrumentation for fetching, extraction and selector learning.
"""

from prometheus_client import Counter, Histogram

# =============================================================================
# Fetch Metrics
# =============================================================================

FETCH_TOTAL = Counter(
    "htmlsoups_fetch_total",
    "Total number of fetch operations",
    ["status", "domain"],
)

FETCH_DURATION = Histogram(
    "htmlsoups_fetch_duration_seconds",
    "Fetch operation duration",
    ["domain"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

FETCH_RETRIES = Counter(
    "htmlsoups_fetch_retries_total",
    "Fetch retry attempts",
    ["domain"],
)

# =============================================================================
# Extraction Metrics
# =============================================================================

EXTRACTION_TOTAL = Counter(
    "htmlsoups_extraction_total",
    "Extraction operations by result and config source",
    ["domain", "source", "status"],
)

# =============================================================================
# Learning Metrics
# =============================================================================

LEARN_RUNS = Counter(
    "htmlsoups_learn_runs_total",
    "Selector learning runs",
    ["content_type", "discovered"],
)

LEARNED_SELECTORS = Histogram(
    "htmlsoups_learned_selectors",
    "Number of ranked selectors returned by a learning run",
    ["content_type"],
    buckets=[0, 1, 2, 5, 10, 20, 50],
)

SELECTOR_FEEDBACK = Counter(
    "htmlsoups_selector_feedback_total",
    "Selector success/failure reports",
    ["content_type", "result"],
)

SELECTORS_PRUNED = Counter(
    "htmlsoups_selectors_pruned_total",
    "Selectors dropped by the low-confidence pruning policy",
    ["content_type"],
)

# =============================================================================
# Storage Metrics
# =============================================================================

STORAGE_OPERATIONS = Counter(
    "htmlsoups_storage_operations_total",
    "Learning state storage operations by backend",
    ["backend", "operation", "status"],
)


# =============================================================================
# Helper Functions
# =============================================================================


def record_fetch(
    domain: str,
    status: str,
    duration_seconds: float,
) -> None:
    """Record metrics for a fetch operation."""
    FETCH_TOTAL.labels(status=status, domain=domain).inc()
    FETCH_DURATION.labels(domain=domain).observe(duration_seconds)


def record_extraction(domain: str, source: str, success: bool) -> None:
    """Record an extraction result."""
    status = "success" if success else "failure"
    EXTRACTION_TOTAL.labels(domain=domain, source=source, status=status).inc()


def record_learning(content_type: str, discovered: bool, selector_count: int) -> None:
    """Record a learning run."""
    LEARN_RUNS.labels(
        content_type=content_type,
        discovered=str(discovered).lower(),
    ).inc()
    LEARNED_SELECTORS.labels(content_type=content_type).observe(selector_count)


def record_feedback(content_type: str, success: bool) -> None:
    """Record a selector feedback report."""
    result = "success" if success else "failure"
    SELECTOR_FEEDBACK.labels(content_type=content_type, result=result).inc()


def record_storage(backend: str, operation: str, success: bool) -> None:
    """Record a storage operation."""
    status = "success" if success else "error"
    STORAGE_OPERATIONS.labels(
        backend=backend, operation=operation, status=status
    ).inc()
