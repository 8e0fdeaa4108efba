import argparse
import os
import sys

# Add repository root to path so we can import routers/auth
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from routers.auth import create_admin_token


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print a bearer token for GET /api/users.")
    parser.add_argument("--subject", default="admin")
    parser.add_argument("--minutes", type=int, default=None, help="lifetime (defaults to JWT_EXP_MIN)")
    args = parser.parse_args(argv)
    print(create_admin_token(subject=args.subject, minutes=args.minutes))


if __name__ == "__main__":
    main()
