"""
Backfill tool for registrations without exactly one primary registrant.

Run this from the project root with the proper virtualenv active. It will:
- list active registrations with zero or several primary registrants
- with --commit, repair them the same way the admin endpoint does

Usage:
  python tools/fix_registrants.py
  python tools/fix_registrants.py --commit --actor admin@example.com

Take a database backup before running with --commit in production.
"""

import argparse
import sys
import os

# Ensure project root is on sys.path so `import confreg` works when invoking
# this script as `python tools/fix_registrants.py` from the repo root
proj_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if proj_root not in sys.path:
    sys.path.insert(0, proj_root)

from confreg import create_app  # noqa: E402
from confreg.models.user import User  # noqa: E402
from confreg.services import repair_service  # noqa: E402


def run(commit=False, actor_email=None):
    app = create_app()
    with app.app_context():
        broken = repair_service.find_broken_registrations()
        print(f"Found {len(broken)} registrations to repair")
        for registration, problem in broken:
            print(f"   {registration.invoice_code} ({registration.status}): {problem}")

        if not commit:
            print("Dry run (no commit). Use --commit to persist")
            return 0

        actor = User.query.filter_by(email=(actor_email or '').strip().lower()).first()
        if actor is None:
            print("--actor must name an existing user", file=sys.stderr)
            return 1

        result = repair_service.fix_primary_registrants(actor)
        print(f"Repaired {result['fixed']} registrations, "
              f"created {result['created']} placeholder registrants")
        return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--commit", action="store_true", help="Persist changes")
    parser.add_argument("--actor", help="Email of the staff user performing the repair")
    args = parser.parse_args()
    try:
        sys.exit(run(commit=args.commit, actor_email=args.actor))
    except Exception:
        print("Error while repairing registrations", file=sys.stderr)
        raise
