"""
Seed the configured backend.

    python seed.py            fill missing or empty collections
    python seed.py --reset    drop everything first (remote store only)
"""
import sys

from app import create_app, db
from services import database

RESET = '--reset' in sys.argv[1:]

app = create_app({'SEED_REMOTE_DATABASE': True})

with app.app_context():
    if database.is_remote(app):
        if RESET:
            import models  # noqa: F401
            db.drop_all()
            db.create_all()
            print("[WARN] Remote tables dropped and recreated")
        database.initialize_database()
    elif RESET:
        print("[WARN] --reset only applies to the remote store")

    print(f"[OK] {database.backend_name(app)} backend seeded successfully")
