"""
Redirects component - data models and errors.

PathMapping is the normalized form every static source folds into.
UrlRecord mirrors one row of the ``urlmap`` table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

# --- Types ---

PathMapping = Mapping[str, str]

REDIRECT_FOUND = 302
REDIRECT_MOVED_PERMANENTLY = 301


# --- Source Models ---


class UrlEntry(BaseModel):
    """One ``{path, url}`` record of a YAML source."""

    path: str = Field(min_length=1)
    url: str = Field(min_length=1)

    model_config = ConfigDict(extra="ignore", frozen=True)


@dataclass(frozen=True)
class UrlRecord:
    """Persisted ``urlmap`` row."""

    shortpath: str
    url: str


# --- Errors ---


class RedirectSourceError(Exception):
    """Base class for redirect source failures."""


class DecodeError(RedirectSourceError, ValueError):
    """Source bytes are malformed or do not have the expected shape."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"Invalid {source} redirect source: {message}")
        self.source = source


class SchemaError(RedirectSourceError):
    """The ``urlmap`` table could not be created."""


class QueryError(RedirectSourceError):
    """A lookup failed for a reason other than a missing row."""
