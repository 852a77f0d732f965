from __future__ import annotations

from adapters.metrics.base import Metrics, ParseStatus


class NoOpMetrics(Metrics):
    def observe_parse_duration_ms(self, *, dt_ms: float) -> None:
        return

    def inc_parse_run(self, *, status: ParseStatus) -> None:
        return

    def inc_parse_error(self, *, error_code: str) -> None:
        return

    def add_parsed(self, *, tables: int, columns: int, foreign_keys: int) -> None:
        return
