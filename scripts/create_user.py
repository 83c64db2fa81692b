"""Create a user in the configured MongoDB database.

Usage:
  python scripts/create_user.py --username alice --password '...'

NOTE: This is intended for local/dev.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from potion_api.auth.crud import register
from potion_api.config import load_config
from potion_api.db import get_database, init_db
from potion_api.errors import ApiError


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--username", required=True)
    ap.add_argument("--password", required=True)
    args = ap.parse_args()

    cfg = load_config()
    db = get_database(cfg)
    init_db(db)

    try:
        u = register(db, username=args.username, password=args.password, rounds=cfg.AUTH_PASSWORD_ROUNDS)
    except ApiError as e:
        print(f"Failed: {e.body()}")
        sys.exit(1)

    print("Created user:")
    print(u)


if __name__ == "__main__":
    main()
