from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from attendance_tracker.container import build_container
from attendance_tracker.core.exceptions import DuplicateUser

DEMO_USERS = [
    ("teacher_demo", "teacher123", "teacher", "teacher@example.edu"),
    ("student_demo", "student123", "student", "student@example.edu"),
]


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), jwt_secret=settings.JWT_SECRET)

    for username, password, role, email in DEMO_USERS:
        try:
            user_id = container.auth_service.register(username, password, role, email=email)
            print(f"OK: created {role} {username} (id={user_id})")
        except DuplicateUser:
            print(f"SKIP: {username} already exists")


if __name__ == "__main__":
    main()
