#!/usr/bin/env python3
"""
Create an administrator account for the analytics dashboard.

Usage:
    python create_admin.py --email admin@example.com --name "Site Admin" --password <password>

The database schema is created first if it does not exist yet. Connection
settings are read the same way as the server reads them (environment or .env).
"""

import argparse
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import database.crud as crud
import Queries
from database.db import Base
from PortfolioConfig import PortfolioConfig


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--email", required=True, help="Login email of the admin")
    parser.add_argument("--name", required=True, help="Display name of the admin")
    parser.add_argument("--password", required=True, help="Plain text password, stored hashed")
    return parser.parse_args(argv)


def create_admin(session, email: str, name: str, password: str):
    """
    Create the admin account, or return None if the email is already taken.
    """
    if crud.get_user_by_email(session, email):
        logging.warning(f"User with email {email} already exists")
        return None

    admin = crud.create_user(
        session,
        Queries.CreateUser(email=email, name=name, password=password, is_admin=True),
    )
    logging.info(f"Created admin {admin.user_id} ({email})")
    return admin


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    load_dotenv()
    args = parse_args(argv)
    config = PortfolioConfig()

    engine = create_engine(config.database_url)
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    try:
        admin = create_admin(session, args.email, args.name, args.password)
    except ValidationError as e:
        logging.error(f"Invalid admin details: {e}")
        return 2
    finally:
        session.close()
        engine.dispose()

    return 0 if admin else 1


if __name__ == "__main__":
    sys.exit(main())
