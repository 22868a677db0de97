import argparse
import logging
import sys
from pathlib import Path

from redirector.adapters.sqlite.repos import SQLiteUrlMapRepo
from redirector.api.deps import Settings, get_settings
from redirector.app_shell.config import configure_logging
from redirector.components.redirects import (
    DecodeError,
    RedirectSourceError,
    UrlRecord,
    parse_json,
    parse_yaml,
)

logger = logging.getLogger("cli")


def get_repo(settings: Settings) -> SQLiteUrlMapRepo:
    if settings.db_path is None:
        logger.error("REDIRECTOR_DB_PATH is empty; the database layer is disabled.")
        sys.exit(1)

    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    repo = SQLiteUrlMapRepo(settings.db_path)
    repo.ensure_schema()
    return repo


def handle_list(repo: SQLiteUrlMapRepo, args: argparse.Namespace) -> None:
    records = repo.list_all()
    for record in records:
        print(f"{record.shortpath}\t{record.url}")
    print(f"{len(records)} redirects.")


def handle_add(repo: SQLiteUrlMapRepo, args: argparse.Namespace) -> None:
    if not args.path.startswith("/"):
        logger.error("Path must start with '/': %s", args.path)
        sys.exit(1)

    repo.save(UrlRecord(shortpath=args.path, url=args.url))
    print(f"{args.path} -> {args.url}")


def handle_remove(repo: SQLiteUrlMapRepo, args: argparse.Namespace) -> None:
    repo.delete(args.path)
    print(f"Removed {args.path}")


def handle_check(settings: Settings) -> int:
    """Decode the configured source files; returns the number of failures."""
    failures = 0
    checks = (
        (settings.yaml_path, lambda data: len(parse_yaml(data))),
        (settings.json_path, lambda data: len(parse_json(data))),
    )
    for path, count in checks:
        if not path.is_file():
            print(f"{path}: not present")
            continue
        try:
            print(f"{path}: {count(path.read_bytes())} entries")
        except DecodeError as e:
            failures += 1
            print(f"{path}: {e}")
    return failures


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Redirector admin CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # list
    subparsers.add_parser("list", help="List database redirects")

    # add
    add_parser = subparsers.add_parser("add", help="Add or replace a database redirect")
    add_parser.add_argument("path", help="Request path, e.g. /docs")
    add_parser.add_argument("url", help="Target URL")

    # remove
    remove_parser = subparsers.add_parser("remove", help="Remove a database redirect")
    remove_parser.add_argument("path", help="Request path")

    # check
    subparsers.add_parser("check", help="Validate the YAML and JSON source files")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "check":
        sys.exit(1 if handle_check(settings) else 0)

    try:
        repo = get_repo(settings)
        if args.command == "list":
            handle_list(repo, args)
        elif args.command == "add":
            handle_add(repo, args)
        elif args.command == "remove":
            handle_remove(repo, args)
    except RedirectSourceError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
