from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal

ParseStatus = Literal["ok", "error"]


class Metrics(ABC):
    @abstractmethod
    def observe_parse_duration_ms(self, *, dt_ms: float) -> None: ...

    @abstractmethod
    def inc_parse_run(self, *, status: ParseStatus) -> None: ...

    @abstractmethod
    def inc_parse_error(self, *, error_code: str) -> None: ...

    @abstractmethod
    def add_parsed(self, *, tables: int, columns: int, foreign_keys: int) -> None: ...
