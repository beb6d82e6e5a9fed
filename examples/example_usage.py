"""Example: drive the service layer directly (no Flask).

Controllers are thin; the attendance rules live in the services. Run from the
repo root against a seeded database:

    python -m examples.example_usage QR_0051234567
"""

import importlib
import sys

from config import get_settings_module

from src.school_attendance.school_attendance.container import build_container
from src.school_attendance.school_attendance.core.exceptions import DuplicateScanError


def main():
    code = sys.argv[1] if len(sys.argv) > 1 else "QR_0051234567"

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        token_secret=settings.TOKEN_SECRET,
        timezone=settings.TIMEZONE or None,
    )

    login = container.auth_service.login("admin", settings.DEFAULT_ADMIN_PASSWORD)
    try:
        record = container.attendance_service.handle_qr_scan(code, login.user.user_id)
    except DuplicateScanError as exc:
        print(f"Already done for today: {exc}")
        return
    print(record)


if __name__ == "__main__":
    main()
