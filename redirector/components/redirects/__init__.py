"""
Redirects component - path to URL redirect handlers.

Static sources (in-memory map, YAML, JSON) and the ``urlmap`` table,
each wrapped around a fallback handler.
"""

from ._impl import (
    DBHandler,
    MapHandler,
    build_map,
    chain,
    db_handler,
    json_handler,
    map_handler,
    not_found,
    parse_json,
    parse_yaml,
    yaml_handler,
)
from .component import DBBuildOutput, run_db, run_json_file, run_yaml_file
from .models import (
    REDIRECT_FOUND,
    REDIRECT_MOVED_PERMANENTLY,
    DecodeError,
    PathMapping,
    QueryError,
    RedirectSourceError,
    SchemaError,
    UrlEntry,
    UrlRecord,
)
from .ports import Handler, UrlMapRepoPort

__all__ = [
    # Entry points
    "run_db",
    "run_json_file",
    "run_yaml_file",
    # Builders
    "chain",
    "db_handler",
    "json_handler",
    "map_handler",
    "not_found",
    "yaml_handler",
    # Parsing helpers
    "build_map",
    "parse_json",
    "parse_yaml",
    # Handlers
    "DBBuildOutput",
    "DBHandler",
    "MapHandler",
    # Models
    "PathMapping",
    "REDIRECT_FOUND",
    "REDIRECT_MOVED_PERMANENTLY",
    "UrlEntry",
    "UrlRecord",
    # Errors
    "DecodeError",
    "QueryError",
    "RedirectSourceError",
    "SchemaError",
    # Ports
    "Handler",
    "UrlMapRepoPort",
]
