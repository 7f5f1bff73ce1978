from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.hr_ops.hr_ops.database.bootstrap import apply_seed_sql, ensure_admin_user


def main() -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Create the admin account and apply database/seed.sql if present.")
    parser.add_argument("--email", default=getattr(settings, "ADMIN_EMAIL", "admin@example.com"))
    parser.add_argument("--password", default=getattr(settings, "ADMIN_PASSWORD", "admin123"))
    args = parser.parse_args()

    db_config = dict(settings.DB_CONFIG)
    seed_path = REPO_ROOT / "database" / "seed.sql"
    if seed_path.exists():
        apply_seed_sql(db_config, seed_path=seed_path)
    ensure_admin_user(db_config, email=args.email, password=args.password)

    print(
        f"OK: Seeded {args.email} -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
