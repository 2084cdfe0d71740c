"""
Prometheus Metrics

Process-wide counters and histograms for the request pipeline, the cache
and the unit of work. Exposed on /metrics.
"""

from prometheus_client import Counter, Histogram

# Pipeline
pipeline_requests_total = Counter(
    "ecommerce_pipeline_requests_total",
    "Total number of dispatched requests by outcome",
    ["request_type", "outcome"],
)
pipeline_request_duration = Histogram(
    "ecommerce_pipeline_request_duration_seconds",
    "Time spent dispatching a request through the pipeline",
    ["request_type"],
)

# Cache
cache_hits_total = Counter(
    "ecommerce_cache_hits_total", "Total number of cache hits", ["request_type"]
)
cache_misses_total = Counter(
    "ecommerce_cache_misses_total", "Total number of cache misses", ["request_type"]
)
cache_errors_total = Counter(
    "ecommerce_cache_errors_total",
    "Cache faults degraded to a miss or skipped write",
    ["operation"],
)
cache_invalidations_total = Counter(
    "ecommerce_cache_invalidations_total",
    "Total number of cache entries removed",
    ["kind"],
)

# Unit of work
transactions_total = Counter(
    "ecommerce_transactions_total",
    "Transactions by terminal outcome",
    ["outcome"],
)
transaction_retries_total = Counter(
    "ecommerce_transaction_retries_total",
    "Transaction attempts retried after a transient fault",
)

# Business
orders_placed_total = Counter(
    "ecommerce_orders_placed_total", "Total number of orders placed"
)
orders_cancelled_total = Counter(
    "ecommerce_orders_cancelled_total", "Total number of orders cancelled"
)
