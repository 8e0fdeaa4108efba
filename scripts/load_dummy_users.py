import os
import sys

import yaml

# Add repository root to path so we can import models/db
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from database import SessionLocal, init_db
from models import User
from services.account_service import AccountError, AccountService
from utils.store import Store


def load_data(path=None):
    init_db()
    path = path or os.path.join(os.path.dirname(__file__), "dummy_users.yml")
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    db = SessionLocal()
    try:
        service = AccountService(Store(db))
        for u_data in data.get("users", []):
            email = str(u_data.get("email", "")).strip().lower()
            if db.query(User).filter(User.email == email).first():
                print(f"User {email} already exists. Skipping.")
                continue
            try:
                user, _ = service.register(
                    full_name=u_data.get("full_name", ""),
                    email=email,
                    phone_number=str(u_data.get("phone_number", "")),
                    password=str(u_data.get("password", "")),
                )
            except AccountError as exc:
                print(f"Skipping {email}: {exc.message}")
                continue
            print(f"Added user {email} (id={user.id}).")
    finally:
        db.close()
    print("Dummy users loaded.")


if __name__ == "__main__":
    load_data(sys.argv[1] if len(sys.argv) > 1 else None)
