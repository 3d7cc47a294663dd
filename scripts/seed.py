"""
Taco Cloud - Database Seeder
==============================
Provisions the ingredient catalog and a demo account.

Usage:
    python scripts/seed.py
    python scripts/seed.py --user alice --password s3cret

Accounts are only ever created here; the web app has no sign-up page.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal, Base, engine
from modules.ingredient.service import ingredient_service
from modules.user.models import ROLE_USER
from modules.user.service import user_service
import modules.taco.models  # noqa: F401
import modules.order.models  # noqa: F401


def seed(username: str, password: str):
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        added = ingredient_service.seed_defaults(db)
        print(f"Ingredients: {added} added")

        if user_service.find_by_username(db, username):
            print(f"User '{username}' already exists, skipped")
        else:
            user_service.create_user(
                db, username, password, roles={ROLE_USER},
                fullname="Taco Lover", street="123 Salsa Street",
                city="Tacoma", state="WA", zip="98401",
                phone_number="253-555-1234",
            )
            print(f"User '{username}' created")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print("\nSeed complete!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed Taco Cloud data")
    parser.add_argument("--user", default="habuma")
    parser.add_argument("--password", default="password")
    args = parser.parse_args()
    seed(args.user, args.password)
