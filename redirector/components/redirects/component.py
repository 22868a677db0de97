"""
Redirects component - source loading.

Shell Layer - handles file I/O and the schema failure policy, then
delegates to the pure handler builders in ``_impl``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ._impl import DBHandler, MapHandler, db_handler, json_handler, yaml_handler
from .models import SchemaError
from .ports import Handler, UrlMapRepoPort

logger = logging.getLogger(__name__)


# --- Component Models (Shell Layer) ---


@dataclass(frozen=True)
class DBBuildOutput:
    """Result of building the database layer."""

    handler: DBHandler
    schema_error: SchemaError | None

    @property
    def degraded(self) -> bool:
        return self.schema_error is not None


# --- Shell Layer Functions ---


def run_yaml_file(path: Path, fallback: Handler) -> MapHandler:
    """Build a handler from a YAML file. Raises DecodeError."""
    handler = yaml_handler(path.read_bytes(), fallback)
    logger.info("Loaded %d YAML redirects from %s", len(handler.mapping), path)
    return handler


def run_json_file(path: Path, fallback: Handler) -> MapHandler:
    """Build a handler from a JSON file. Raises DecodeError."""
    handler = json_handler(path.read_bytes(), fallback)
    logger.info("Loaded %d JSON redirects from %s", len(handler.mapping), path)
    return handler


def run_db(
    repo: UrlMapRepoPort,
    fallback: Handler,
    *,
    strict: bool = False,
) -> DBBuildOutput:
    """
    Build the database layer.

    With ``strict`` a schema failure is raised; otherwise it is logged and
    the handler is returned in a degraded state.
    """
    handler, schema_error = db_handler(repo, fallback)

    if schema_error is not None:
        if strict:
            raise schema_error
        logger.error("URL map schema unavailable, serving degraded: %s", schema_error)

    return DBBuildOutput(handler=handler, schema_error=schema_error)
