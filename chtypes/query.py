"""A SQL statement with an optional query id."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable


@dataclass(frozen=True)
class Query:
    sql: str
    id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "sql", str(self.sql))
        object.__setattr__(self, "id", str(self.id))

    def with_id(self, query_id: str) -> "Query":
        """Return a copy carrying ``query_id``."""
        return replace(self, id=query_id)

    def map_sql(self, func: Callable[[str], str]) -> "Query":
        """Return a copy whose SQL text is ``func(sql)``."""
        return replace(self, sql=func(self.sql))