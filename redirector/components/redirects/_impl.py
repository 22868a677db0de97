"""
Redirect handlers - path lookup and source decoding.

Every handler built here either redirects or hands the request to its
fallback; none of them answers "not found" on its own.

Key behaviors:
- Static sources (map, YAML, JSON) redirect with 302
- Database rows redirect with 301
- Matching is exact string equality on the request path
- YAML duplicates resolve last-write-wins in document order
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from types import MappingProxyType

import yaml
from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from pydantic import TypeAdapter, ValidationError

from .models import (
    REDIRECT_FOUND,
    REDIRECT_MOVED_PERMANENTLY,
    DecodeError,
    PathMapping,
    QueryError,
    SchemaError,
    UrlEntry,
)
from .ports import Handler, UrlMapRepoPort

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[UrlEntry])
_JSON_MAPPING = TypeAdapter(dict[str, str])


# --- Parsing Helpers ---


def parse_yaml(data: bytes | str) -> list[UrlEntry]:
    """
    Decode a YAML sequence of ``{path, url}`` records.

    An empty document decodes to no entries.
    Raises DecodeError chained to the YAML or validation error.
    """
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise DecodeError("YAML", str(e)) from e

    if raw is None:
        return []

    try:
        return _ENTRIES.validate_python(raw)
    except ValidationError as e:
        raise DecodeError("YAML", str(e)) from e


def parse_json(data: bytes | str) -> dict[str, str]:
    """
    Decode a JSON object of ``path -> url`` strings.

    Raises DecodeError chained to the JSON or validation error.
    """
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError("JSON", str(e)) from e

    try:
        return _JSON_MAPPING.validate_python(raw)
    except ValidationError as e:
        raise DecodeError("JSON", str(e)) from e


def build_map(entries: Iterable[UrlEntry]) -> dict[str, str]:
    """Fold entries into a mapping; later paths override earlier ones."""
    merged: dict[str, str] = {}
    for entry in entries:
        merged[entry.path] = entry.url
    return merged


# --- Request Path ---


def request_path(request: Request) -> str:
    """
    Decoded request path, exactly as the server received it.

    ``request.url.path`` is rebuilt by re-parsing a URL string, which cuts
    a decoded ``?`` or ``#`` out of the path. The scope value keeps it.
    """
    path: str = request.scope["path"]
    return path


# --- Fallbacks ---


def not_found(request: Request) -> Response:
    """Default fallback: plain text 404."""
    return PlainTextResponse("404 page not found", status_code=status.HTTP_404_NOT_FOUND)


# --- Handlers ---


class MapHandler:
    """Redirects paths found in an in-memory mapping (302)."""

    def __init__(self, mapping: PathMapping, fallback: Handler) -> None:
        self._mapping: PathMapping = MappingProxyType(dict(mapping))
        self._fallback = fallback

    @property
    def mapping(self) -> PathMapping:
        """Read-only view of the path mapping."""
        return self._mapping

    @property
    def fallback(self) -> Handler:
        return self._fallback

    def __call__(self, request: Request) -> Response:
        path = request_path(request)
        target = self._mapping.get(path)
        if target is None:
            return self._fallback(request)

        logger.debug("Redirecting %s -> %s", path, target)
        return RedirectResponse(url=target, status_code=REDIRECT_FOUND)

    def __repr__(self) -> str:
        return f"MapHandler(paths={len(self._mapping)})"


class DBHandler:
    """
    Redirects paths found in the ``urlmap`` table (301).

    One read query per request. Lookup failures answer 500 with a
    generic body; the underlying error is logged, not sent.
    """

    def __init__(self, repo: UrlMapRepoPort, fallback: Handler) -> None:
        self._repo = repo
        self._fallback = fallback

    @property
    def fallback(self) -> Handler:
        return self._fallback

    def __call__(self, request: Request) -> Response:
        path = request_path(request)
        try:
            record = self._repo.get_by_shortpath(path)
        except QueryError:
            logger.exception("URL map lookup failed for %s", path)
            return PlainTextResponse(
                "Internal Server Error",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if record is None:
            return self._fallback(request)

        logger.debug("Redirecting %s -> %s", path, record.url)
        return RedirectResponse(url=record.url, status_code=REDIRECT_MOVED_PERMANENTLY)


# --- Factories ---


def map_handler(mapping: PathMapping, fallback: Handler) -> MapHandler:
    """Build a handler over a path -> URL mapping."""
    return MapHandler(mapping, fallback)


def yaml_handler(data: bytes | str, fallback: Handler) -> MapHandler:
    """
    Build a handler from YAML of the form::

        - path: /some-path
          url: https://www.some-url.com/demo

    Raises DecodeError on malformed input; no handler is built.
    """
    return MapHandler(build_map(parse_yaml(data)), fallback)


def json_handler(data: bytes | str, fallback: Handler) -> MapHandler:
    """
    Build a handler from JSON of the form::

        {"/some-path": "https://www.some-url.com/demo"}

    Raises DecodeError on malformed input; no handler is built.
    """
    return MapHandler(parse_json(data), fallback)


def db_handler(
    repo: UrlMapRepoPort,
    fallback: Handler,
) -> tuple[DBHandler, SchemaError | None]:
    """
    Build a database-backed handler.

    Schema creation failure does not prevent construction. The error is
    returned next to the handler and the caller decides whether to
    proceed; lookups against a missing table then answer 500.
    """
    schema_error: SchemaError | None = None
    try:
        repo.ensure_schema()
    except SchemaError as e:
        schema_error = e

    return DBHandler(repo, fallback), schema_error


def chain(fallback: Handler, *layers: Callable[[Handler], Handler]) -> Handler:
    """
    Compose handler layers around a final fallback.

    Each layer is a callable taking the next handler and returning a
    handler. The first layer is consulted first.
    """
    handler = fallback
    for layer in reversed(layers):
        handler = layer(handler)
    return handler
