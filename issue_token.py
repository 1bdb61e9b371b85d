import os
import sys
import argparse
from datetime import timedelta

# Add the project root to the Python path to allow imports from 'aquamonitor'
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.append(project_root)

from aquamonitor.core.security import ROLE_ADMIN, ROLE_RECORDER, create_principal_token


def issue_token(subject, admin=False, expires_minutes=None):
    """Mints a bearer token for a recorder, or for an administrator with --admin."""
    role = ROLE_ADMIN if admin else ROLE_RECORDER
    expires_delta = timedelta(minutes=expires_minutes) if expires_minutes else None
    return create_principal_token(subject, role=role, expires_delta=expires_delta)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Issue an API token for a recorder or administrator.")
    parser.add_argument("--subject", required=True, help="Identity recorded on measurements (e.g. a station id).")
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Grant the administrator role, which may update thresholds."
    )
    parser.add_argument("--expires-minutes", type=int, default=None, help="Token lifetime in minutes.")

    args = parser.parse_args()

    if not args.subject.strip():
        print("Error: Subject must not be empty.")
        sys.exit(1)

    print(issue_token(args.subject, admin=args.admin, expires_minutes=args.expires_minutes))
