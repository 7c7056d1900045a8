"""Query-string access for URL-synchronised filter state."""

from __future__ import annotations

from typing import Protocol
from urllib.parse import parse_qsl, urlencode


class QueryStringAdapter(Protocol):
    """Read and replace the current page's query parameters."""

    def read(self) -> dict[str, str]:
        ...

    def write(self, params: dict[str, str]) -> None:
        ...


class InMemoryQueryString:
    """Query string held in memory; every write is appended to ``history``."""

    def __init__(self, query: str = "", *, path: str = "/") -> None:
        self._path = path
        self._query = query.lstrip("?")
        self.history: list[str] = []

    @property
    def query(self) -> str:
        return self._query

    @property
    def url(self) -> str:
        return f"{self._path}?{self._query}" if self._query else self._path

    def read(self) -> dict[str, str]:
        return dict(parse_qsl(self._query, keep_blank_values=True))

    def write(self, params: dict[str, str]) -> None:
        self._query = urlencode(params)
        self.history.append(self.url)
