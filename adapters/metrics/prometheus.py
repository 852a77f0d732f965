from __future__ import annotations

from prometheus_client import Counter, Histogram
from sqlite_parser.prom import REGISTRY

from adapters.metrics.base import Metrics, ParseStatus
from sqlite_parser.errors.codes import ErrorCode

# -----------------------------------------------------------------------------
# Parse-level metrics
# -----------------------------------------------------------------------------
parse_duration_ms = Histogram(
    "schema_parse_duration_ms",
    "Duration (ms) of a full schema parse",
    buckets=(1, 2, 5, 10, 20, 50, 100, 200, 500, 1000, 2000, 5000, 10000),
    registry=REGISTRY,
)

parse_runs_total = Counter(
    "schema_parse_runs_total",
    "Total number of schema parses",
    ["status"],
    registry=REGISTRY,
)

parse_errors_total = Counter(
    "schema_parse_errors_total",
    "Count of aborted parses labeled by error_code",
    ["error_code"],
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Volume metrics
# -----------------------------------------------------------------------------
tables_parsed_total = Counter(
    "schema_tables_parsed_total",
    "Tables assembled across all parses",
    registry=REGISTRY,
)

columns_parsed_total = Counter(
    "schema_columns_parsed_total",
    "Columns assembled across all parses",
    registry=REGISTRY,
)

foreign_keys_parsed_total = Counter(
    "schema_foreign_keys_parsed_total",
    "Foreign keys assembled across all parses",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Cache metrics
# -----------------------------------------------------------------------------
cache_events_total = Counter(
    "schema_cache_events_total",
    "Schema cache hit/miss events",
    ["hit"],
    registry=REGISTRY,
)


class PrometheusMetrics(Metrics):
    def observe_parse_duration_ms(self, *, dt_ms: float) -> None:
        parse_duration_ms.observe(float(dt_ms))

    def inc_parse_run(self, *, status: ParseStatus) -> None:
        parse_runs_total.labels(status=status).inc()

    def inc_parse_error(self, *, error_code: str) -> None:
        parse_errors_total.labels(error_code=str(error_code)).inc()

    def add_parsed(self, *, tables: int, columns: int, foreign_keys: int) -> None:
        tables_parsed_total.inc(tables)
        columns_parsed_total.inc(columns)
        foreign_keys_parsed_total.inc(foreign_keys)


# -----------------------------------------------------------------------------
# Label priming to keep /metrics stable
# -----------------------------------------------------------------------------
for status in ("ok", "error"):
    parse_runs_total.labels(status=status).inc(0)

for code in ErrorCode:
    parse_errors_total.labels(error_code=code.value).inc(0)
parse_errors_total.labels(error_code="unknown").inc(0)

for hit in ("true", "false"):
    cache_events_total.labels(hit=hit).inc(0)
