import logging
from pathlib import Path

from redirector.api.deps import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def configure_logging(level: str = "INFO") -> None:
    """Logging setup for the service process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def validate_settings(settings: Settings) -> None:
    """
    Validate configuration before startup.
    Raises ValueError on the first problem found.
    """
    # 1. Log level
    if settings.log_level not in _LEVELS:
        raise ValueError(f"Unknown log level: {settings.log_level}")

    # 2. Source files: a missing file disables the layer, a directory is a mistake
    for name, path in (("YAML", settings.yaml_path), ("JSON", settings.json_path)):
        if path.exists() and not path.is_file():
            raise ValueError(f"{name} redirect source is not a file: {path}")

    # 3. Database path
    if settings.db_path is not None and Path(settings.db_path).is_dir():
        raise ValueError(f"Database path is a directory: {settings.db_path}")
