"""Create the first super admin account.

Usage:
  python scripts/create_admin.py --email admin@example.com --password 'change-me'

The password may also come from the ADMIN_PASSWORD environment variable.
"""
import argparse
import os
import sys

proj_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if proj_root not in sys.path:
    sys.path.insert(0, proj_root)

from confreg import create_app, db  # noqa: E402
from confreg.models.user import USER_ROLES, User  # noqa: E402


def run(email, password, full_name, role):
    app = create_app()
    with app.app_context():
        email = email.strip().lower()
        existing = User.query.filter_by(email=email).first()
        if existing:
            print(f"User {email} already exists (role {existing.role})")
            return 1

        admin = User(email=email, full_name=full_name, role=role)
        admin.set_password(password)
        db.session.add(admin)
        db.session.commit()
        print(f"Created {role} {email}")
        return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD"))
    parser.add_argument("--full-name", default="Administrator")
    parser.add_argument("--role", default="super_admin", choices=USER_ROLES)
    args = parser.parse_args()
    if not args.password or len(args.password) < 6:
        parser.error("a password of at least 6 characters is required")
    sys.exit(run(args.email, args.password, args.full_name, args.role))
