"""
Redirects component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from fastapi import Request, Response

from .models import UrlRecord


class Handler(Protocol):
    """Anything that turns one request into one response."""

    def __call__(self, request: Request) -> Response:
        """Handle a request."""
        ...


class UrlMapRepoPort(Protocol):
    """
    Repository interface for the ``urlmap`` table.

    Storage failures surface as SchemaError / QueryError, never as
    driver exceptions. A missing row is not a failure.
    """

    def ensure_schema(self) -> None:
        """Create the table if it does not exist. Raises SchemaError."""
        ...

    def get_by_shortpath(self, shortpath: str) -> UrlRecord | None:
        """Get the record for an exact path. Raises QueryError."""
        ...

    def save(self, record: UrlRecord) -> UrlRecord:
        """Insert or update a record keyed by shortpath."""
        ...

    def delete(self, shortpath: str) -> None:
        """Delete the record for a path."""
        ...

    def list_all(self) -> list[UrlRecord]:
        """List all records ordered by shortpath."""
        ...

    def ping(self) -> None:
        """Check the database is reachable. Raises QueryError."""
        ...
