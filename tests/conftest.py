from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from redirector.adapters.sqlite.repos import SQLiteUrlMapRepo
from redirector.api.deps import get_settings
from redirector.components.redirects import UrlRecord


class RecordingFallback:
    """Fallback handler that remembers every request it receives."""

    def __init__(self, body: str = "fallback", status_code: int = 404) -> None:
        self.body = body
        self.status_code = status_code
        self.requests: list[Request] = []

    def __call__(self, request: Request) -> Response:
        self.requests.append(request)
        return PlainTextResponse(self.body, status_code=self.status_code)


@pytest.fixture
def fallback() -> RecordingFallback:
    return RecordingFallback()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a bare ASGI request for calling handlers directly."""

    def _make(path: str, method: str = "GET") -> Request:
        return Request(
            {
                "type": "http",
                "method": method,
                "path": path,
                "root_path": "",
                "query_string": b"",
                "headers": [(b"host", b"testserver")],
                "scheme": "http",
                "server": ("testserver", 80),
            }
        )

    return _make


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "redirector.db")


@pytest.fixture
def repo(db_path: str) -> SQLiteUrlMapRepo:
    repo = SQLiteUrlMapRepo(db_path)
    repo.ensure_schema()
    return repo


@pytest.fixture
def seeded_repo(repo: SQLiteUrlMapRepo) -> SQLiteUrlMapRepo:
    repo.save(UrlRecord(shortpath="/b", url="https://example.com/z"))
    repo.save(UrlRecord(shortpath="/docs", url="https://docs.python.org/3/"))
    return repo


@pytest.fixture
def corrupt_db_path(tmp_path: Path) -> str:
    """A file sqlite refuses to open as a database."""
    path = tmp_path / "corrupt.db"
    path.write_bytes(b"this is not an sqlite database " * 64)
    return str(path)


@pytest.fixture
def redirector_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, db_path: str
) -> Iterator[Path]:
    """Point every REDIRECTOR_* setting into tmp_path."""
    monkeypatch.setenv("REDIRECTOR_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REDIRECTOR_DB_PATH", db_path)
    monkeypatch.setenv("REDIRECTOR_YAML_PATH", str(tmp_path / "redirects.yaml"))
    monkeypatch.setenv("REDIRECTOR_JSON_PATH", str(tmp_path / "redirects.json"))
    monkeypatch.delenv("REDIRECTOR_STRICT_SCHEMA", raising=False)
    monkeypatch.delenv("REDIRECTOR_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()
