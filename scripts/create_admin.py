# scripts/create_admin.py
"""
Create an admin account from the command line.
Bypasses the shared admin secret because it needs direct database access.

Usage:
    python scripts/create_admin.py --email admin@example.com --name Admin
"""

import sys
import argparse
import getpass
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatplatform.auth.service import MIN_PASSWORD_LENGTH, register_user
from chatplatform.core.exceptions import ConflictError
from chatplatform.db.init_db import init_database
from chatplatform.db.session import session_scope


def main():
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        sys.exit(1)

    init_database()

    try:
        with session_scope() as db:
            user = register_user(db, email=args.email, password=password, name=args.name, role="admin")
            print("Admin user created!")
            print(f"   Email: {user.email}")
            print(f"   User ID: {user.id}")
    except ConflictError as e:
        print(f"Failed to create admin: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
