"""Shared mock fixtures for repository tests.

Uses a MockSupabaseClient that records calls and returns configurable responses.
The mock auto-handles maybe_single() semantics:
- dict data + maybe_single() → returns dict (single row)
- dict data + no maybe_single() → wraps in list (for update/insert)
- list data + maybe_single() → returns first element or None
- None/[] + maybe_single() → returns None
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class MockResponse:
    """Simulated PostgREST response."""

    data: Any = None
    count: int | None = None


class MockRequestBuilder:
    """Chainable mock that records method calls and returns a configurable response.

    Every call is appended to `calls` as (method, args, kwargs) so tests can
    assert on filters. If `error` is set, execute() raises it.
    """

    def __init__(self, response: MockResponse | None = None, error: Exception | None = None) -> None:
        self._response = response or MockResponse()
        self._error = error
        self._is_maybe_single = False
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def _chain(self, method: str, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        self.calls.append((method, args, kwargs))
        return self

    def select(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("select", *args, **kwargs)

    def insert(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("insert", *args, **kwargs)

    def update(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("update", *args, **kwargs)

    def upsert(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("upsert", *args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("delete", *args, **kwargs)

    def eq(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("eq", *args, **kwargs)

    def order(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("order", *args, **kwargs)

    def limit(self, *args: Any, **kwargs: Any) -> MockRequestBuilder:
        return self._chain("limit", *args, **kwargs)

    def maybe_single(self) -> MockRequestBuilder:
        self._is_maybe_single = True
        return self._chain("maybe_single")

    async def execute(self) -> MockResponse:
        """Return response with automatic maybe_single() handling."""
        if self._error is not None:
            raise self._error

        data = self._response.data
        count = self._response.count

        if self._is_maybe_single:
            resolved = (data[0] if data else None) if isinstance(data, list) else data
            return MockResponse(data=resolved, count=count)

        if data is None:
            return MockResponse(data=[], count=count)
        if isinstance(data, dict):
            return MockResponse(data=[data], count=count)
        return self._response


@dataclass
class MockSupabaseClient:
    """SupabaseClient mock that returns preconfigured responses per table.

    Creates a NEW MockRequestBuilder for each table() call so that
    maybe_single() state doesn't leak between query chains. Builders are kept
    in `builders` for call assertions.
    """

    _responses: dict[str, MockResponse] = field(default_factory=dict)
    _errors: dict[str, Exception] = field(default_factory=dict)
    builders: list[tuple[str, MockRequestBuilder]] = field(default_factory=list)

    def set_response(self, table: str, response: MockResponse) -> None:
        """Set the response for a given table name."""
        self._responses[table] = response

    def set_error(self, table: str, error: Exception) -> None:
        """Make every query on `table` raise `error` from execute()."""
        self._errors[table] = error

    def table(self, name: str) -> MockRequestBuilder:
        """Return a fresh MockRequestBuilder for the given table."""
        builder = MockRequestBuilder(self._responses.get(name, MockResponse()), self._errors.get(name))
        self.builders.append((name, builder))
        return builder

    def last_calls(self, table: str) -> list[tuple[str, tuple[Any, ...], dict[str, Any]]]:
        """Calls recorded on the most recent builder for `table`."""
        for name, builder in reversed(self.builders):
            if name == table:
                return builder.calls
        return []


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_db() -> MockSupabaseClient:
    """MockSupabaseClient instance."""
    return MockSupabaseClient()
