from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_attendance.school_attendance.database.bootstrap import (
    apply_seed_sql,
    ensure_default_admin,
    sync_student_qr_codes,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Load demo classes/students and (re)set the default admin account.")
    parser.add_argument("--admin-only", action="store_true", help="only create or reset the default admin")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if not args.admin_only:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        sync_student_qr_codes(db_config)
    ensure_default_admin(db_config, password=settings.DEFAULT_ADMIN_PASSWORD)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
