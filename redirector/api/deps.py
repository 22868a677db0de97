import logging
import os
from collections.abc import Callable
from functools import lru_cache, partial
from pathlib import Path

from fastapi import Depends, Request

from redirector.adapters.sqlite.repos import SQLiteUrlMapRepo
from redirector.components.redirects import (
    Handler,
    chain,
    not_found,
    run_db,
    run_json_file,
    run_yaml_file,
)

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.data_dir = Path(os.environ.get("REDIRECTOR_DATA_DIR", "./data"))
        db_path = os.environ.get("REDIRECTOR_DB_PATH", str(self.data_dir / "redirector.db"))
        self.db_path: str | None = db_path or None
        self.yaml_path = Path(os.environ.get("REDIRECTOR_YAML_PATH", "redirects.yaml"))
        self.json_path = Path(os.environ.get("REDIRECTOR_JSON_PATH", "redirects.json"))
        self.strict_schema = (
            os.environ.get("REDIRECTOR_STRICT_SCHEMA", "false").strip().lower() in _TRUTHY
        )
        self.log_level = os.environ.get("REDIRECTOR_LOG_LEVEL", "INFO").upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Repos ---
def get_urlmap_repo(settings: Settings = Depends(get_settings)) -> SQLiteUrlMapRepo | None:
    if settings.db_path is None:
        return None
    return SQLiteUrlMapRepo(settings.db_path)


# --- Handler chain ---
def build_redirect_chain(settings: Settings, fallback: Handler = not_found) -> Handler:
    """
    Compose the configured sources around ``fallback``.

    Precedence: YAML file, JSON file, database. Missing files and an
    unset database path skip that layer. Decode errors propagate.
    """
    layers: list[Callable[[Handler], Handler]] = []

    if settings.yaml_path.is_file():
        layers.append(partial(run_yaml_file, settings.yaml_path))
    else:
        logger.info("No YAML redirects at %s", settings.yaml_path)

    if settings.json_path.is_file():
        layers.append(partial(run_json_file, settings.json_path))
    else:
        logger.info("No JSON redirects at %s", settings.json_path)

    repo = get_urlmap_repo(settings)
    if repo is not None:
        Path(repo.db_path).parent.mkdir(parents=True, exist_ok=True)
        layers.append(
            lambda next_handler: run_db(repo, next_handler, strict=settings.strict_schema).handler
        )
        logger.info("Database redirects from %s", repo.db_path)

    return chain(fallback, *layers)


def get_active_handler(request: Request) -> Handler:
    """Handler installed on the application at startup."""
    handler: Handler = request.app.state.redirect_handler
    return handler
