"""
Inspect or change the stored greeting suffix without going through HTTP.

Examples:
    python scripts/greeter_admin.py show
    python scripts/greeter_admin.py set Dakota --database-path /tmp/greeter.db
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from greeter.config import StoreConfig, get_settings
from greeter.errors import GreeterError
from greeter.store import SqlSettingsStore

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Greeter settings admin")
    parser.add_argument(
        "--database-path",
        type=str,
        default=settings.database_path,
        help="SQLite file to operate on",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init", help="Create the table and seed the default row")
    subparsers.add_parser("show", help="Print the current greeting")
    set_parser = subparsers.add_parser("set", help="Replace the greeting suffix")
    set_parser.add_argument("name", type=str)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    config = StoreConfig.from_settings(settings)
    store = SqlSettingsStore(
        StoreConfig(
            database_path=args.database_path,
            setting_key=config.setting_key,
            default_value=config.default_value,
        )
    )
    try:
        store.initialize()
        if args.command == "set":
            if not args.name:
                parser.error("name must not be empty")
            store.set_suffix(args.name)
            logger.info("Name suffix updated to %s.", args.name)
        elif args.command == "show":
            print(f"Hello, {store.get_suffix()}!")
    except GreeterError as exc:
        logger.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
