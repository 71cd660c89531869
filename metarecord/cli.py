# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Inspect and edit meta attributes from the shell, without
#   declaring record classes. Connection settings come from
#   get_config() (.env / environment).
#
# COMMANDS:
# ---------
# 1. Show the meta table name for a host table (no database access):
#    python -m metarecord.cli meta-table "{{%post}}"
#
# 2. Check / create the meta table:
#    python -m metarecord.cli ensure post
#    python -m metarecord.cli ensure post --create
#
# 3. Read one meta value:
#    python -m metarecord.cli get post 42 color
#
# 4. Write one meta value:
#    python -m metarecord.cli set post 42 color red
#
# 5. List every meta row of a record:
#    python -m metarecord.cli dump post 42
#
# Exit codes: 0 success, 1 not found / write failed, 2 usage error.
#
# ==============================================

import argparse
import sys
from typing import Any, List, Optional

from metarecord.config import AppConfig, create_client, get_config
from metarecord.persistence.meta_store import MetaCache, MetaStore, PendingWriteQueue
from metarecord.persistence.naming import meta_table_name


class RecordRef:
    """A saved host row identified only by table name and primary key."""

    def __init__(self, table: str, record_id: Any):
        self._table = table
        self._record_id = record_id
        self.meta_cache = MetaCache()
        self.pending_meta = PendingWriteQueue()

    def table_name(self) -> str:
        return self._table

    def primary_key_value(self) -> Any:
        return self._record_id

    def is_new_record(self) -> bool:
        return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metarecord",
        description="Inspect and edit meta attributes of relational records."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("meta-table", help="print the meta table name for a host table")
    p.add_argument("table")

    p = sub.add_parser("ensure", help="check that the meta table exists")
    p.add_argument("table")
    p.add_argument("--create", action="store_true", help="create the table if missing")

    p = sub.add_parser("get", help="read one meta value")
    p.add_argument("table")
    p.add_argument("record_id", type=int)
    p.add_argument("key")

    p = sub.add_parser("set", help="write one meta value")
    p.add_argument("table")
    p.add_argument("record_id", type=int)
    p.add_argument("key")
    p.add_argument("value")

    p = sub.add_parser("dump", help="list all meta rows of a record")
    p.add_argument("table")
    p.add_argument("record_id", type=int)

    return parser


def run(args: argparse.Namespace, config: AppConfig, client) -> int:
    store = MetaStore(client, config.meta)

    if args.command == "ensure":
        ref = RecordRef(args.table, None)
        exists = store.ensure_meta_table(ref, auto_create=args.create)
        print(f"{store.resolve_meta_table_name(ref)}: {'present' if exists else 'missing'}")
        return 0 if exists else 1

    record = RecordRef(args.table, args.record_id)

    if args.command == "get":
        value = store.get_meta_attribute(record, args.key)
        if value is None:
            print(f"{args.key}: <unset>")
            return 1
        print(value)
        return 0

    if args.command == "set":
        written = store.set_meta_attribute(record, args.key, args.value)
        print(f"{args.key} = {args.value!r}" if written else f"✗ {args.key} not written")
        return 0 if written else 1

    if args.command == "dump":
        rows = store.load_all_meta_data(record)
        for row in rows:
            print(f"{row['meta_key']}\t{row['meta_value']}")
        print(f"{len(rows)} meta rows for {args.table} #{args.record_id}")
        return 0

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()

    if args.command == "meta-table":
        print(meta_table_name(
            args.table,
            table_prefix=config.meta.table_prefix,
            suffix=config.meta.meta_table_suffix
        ))
        return 0

    with create_client(config) as client:
        return run(args, config, client)


if __name__ == "__main__":
    sys.exit(main())
