import sys
from pathlib import Path

from redirector.adapters.sqlite.repos import SQLiteUrlMapRepo
from redirector.api.deps import get_settings
from redirector.components.redirects import UrlRecord, build_map, parse_yaml

SAMPLE_REDIRECTS = """\
- path: /urlshort
  url: https://github.com/gophercises/urlshort
- path: /urlshort-final
  url: https://github.com/gophercises/urlshort/tree/solution
"""


def seed(source: Path | None = None) -> int:
    settings = get_settings()
    if settings.db_path is None:
        print("REDIRECTOR_DB_PATH is empty; the database layer is disabled, nothing seeded.")
        return 0

    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    print(f"Seeding to {settings.db_path}")

    repo = SQLiteUrlMapRepo(settings.db_path)
    repo.ensure_schema()

    data = source.read_bytes() if source else SAMPLE_REDIRECTS
    mapping = build_map(parse_yaml(data))
    for shortpath, url in mapping.items():
        repo.save(UrlRecord(shortpath=shortpath, url=url))
        print(f"  {shortpath} -> {url}")

    print(f"Seeded {len(mapping)} redirects.")
    return len(mapping)


if __name__ == "__main__":
    seed(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
