import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from potion_api.config import load_config
from potion_api.db import get_database, init_db


def main() -> None:
    cfg = load_config()
    init_db(get_database(cfg))
    print(f"DB initialized: {cfg.MONGO_URI} / {cfg.MONGO_DB_NAME}")


if __name__ == "__main__":
    main()
