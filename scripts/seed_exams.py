"""Seed the default exam catalog and, when ADMIN_EMAIL is set, the admin account.

Usage (from the repository root):
    python scripts/seed_exams.py
"""

import os
import sys

# Add the repository root to path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from hireperfect.components.catalog.seed import seed_admin, seed_default_exams
from hireperfect.platform.config import settings
from hireperfect.platform.database import Base, SessionLocal, engine
from hireperfect.platform.logging import setup_logging


def main() -> int:
    setup_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        inserted = seed_default_exams(db, duration_minutes=settings.DEFAULT_EXAM_DURATION_MINUTES)
        print(f"Inserted {inserted} exam(s).")
        admin = seed_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_NAME)
        if admin is None:
            print("ADMIN_EMAIL not set; skipping admin account.")
        else:
            print(f"Admin account ready: {admin.email} (id={admin.id})")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
