"""
Provision a user (there is no registration UI). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD NAME EMAIL [role]
Example:
  python -m app.scripts.create_user admin 'S3cure-password' 'Site Admin' admin@example.com admin
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.security import USERNAME_MAX_LEN, hash_password, password_policy_error
from app.models.user import USER_ROLES, User
from app.repositories import UserRepository


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a DABS user.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help="Password (8-72 chars, upper, lower and digit)")
    parser.add_argument("name", help="Full name")
    parser.add_argument("email", help="Email address (used for password resets)")
    parser.add_argument("role", nargs="?", default="user", choices=list(USER_ROLES))
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    problem = password_policy_error(args.password)
    if problem:
        print(problem, file=sys.stderr)
        return 1
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.get_by_username(username):
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        if users.get_by_email(email):
            print(f"Email '{email}' is already in use.", file=sys.stderr)
            return 1
        users.add(
            User(
                username=username,
                password_hash=hash_password(args.password),
                name=args.name.strip(),
                email=email,
                role=args.role,
            )
        )
        db.commit()
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
