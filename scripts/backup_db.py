from __future__ import annotations

import argparse
import os
from pathlib import Path

from services.api.app.db.database import JsonDocumentStore, StoreError
from services.api.app.db.init_db import init_db


def main() -> int:
    parser = argparse.ArgumentParser(description="Snapshot the POS orders database")
    parser.add_argument(
        "--db-path",
        default=os.getenv("POS_DB_PATH", "data/db.json"),
        help="Database file (default: data/db.json)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Snapshot path (default: timestamped backup beside the database file)",
    )
    args = parser.parse_args()

    db_path = Path(args.db_path)
    if not db_path.exists():
        raise SystemExit(f"Database file not found: {db_path}")

    try:
        store = init_db(JsonDocumentStore(db_path))
        if args.output:
            backup_path = store.snapshot_to_file(Path(args.output))
        else:
            backup_path = store.create_backup()
    except StoreError as e:
        raise SystemExit(f"Backup failed: {e}") from e

    print(f"Backup written to {backup_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
