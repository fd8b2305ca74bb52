"""
Create the customer tables directly from the ORM metadata (local development / demos).
Production databases go through `alembic upgrade head` (scripts/release.py).

Usage:
  python scripts/init_db.py [--drop]
"""
import argparse
import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import create_engine  # noqa: E402

from app.crm.models import Base  # noqa: E402


def init_schema(*, database_url: str | None = None, drop: bool = False) -> None:
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///customers.db").strip()
    engine = create_engine(db_url, future=True)
    try:
        if drop:
            Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    print(f"Schema ready: {', '.join(sorted(Base.metadata.tables))}", flush=True)


def main() -> None:
    ap = argparse.ArgumentParser(description="Create customer tables from ORM metadata.")
    ap.add_argument("--drop", action="store_true", help="Drop existing tables first.")
    args = ap.parse_args()
    init_schema(drop=args.drop)


if __name__ == "__main__":
    main()
