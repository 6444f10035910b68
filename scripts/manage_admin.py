#!/usr/bin/env python3
"""Create a user or reset an existing user's password and role.

Usage:
  # create or update the admin account
  python3 scripts/manage_admin.py --username admin --password secret --role admin

  # a shop-floor operator
  python3 scripts/manage_admin.py --username op01 --password 1234 --role shop --name "Line 1"

The script creates DB tables if missing. If the database is unreachable you'll see the DB errors.
"""
import sys
from pathlib import Path
import argparse

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shopfloor.database import SessionLocal, Base, engine
from shopfloor import crud
from shopfloor.models.enums import UserRole


def main(argv=None):
    parser = argparse.ArgumentParser(description='Create a user or reset its password and role')
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default=None)
    parser.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.admin.value)
    args = parser.parse_args(argv)

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as exc:
        print("Warning: could not create tables on startup:", exc)

    role = UserRole(args.role)
    with SessionLocal() as db:
        user = crud.get_user_by_username(db, args.username)
        if user:
            print(f"Updating existing user: {args.username} ({role.value})")
            user.role = role
            user.active = True
            if args.name:
                user.full_name = args.name
            crud.set_password(db, user, args.password)
            print("Password updated")
        else:
            print(f"Creating user: {args.username} ({role.value})")
            crud.create_user(db, args.username, args.password, full_name=args.name, role=role)
            print("User created")


if __name__ == '__main__':
    main()
