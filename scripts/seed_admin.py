#!/usr/bin/env python3
"""
Seed the first back-office admin.

Reads ADMIN_EMAIL and ADMIN_PASSWORD from .env file.
Run from project root: python scripts/seed_admin.py
"""

import sys
import os

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# Load .env file
from dotenv import load_dotenv
load_dotenv(os.path.join(project_root, ".env"))

import bcrypt as bcrypt_lib
from src.db import supabase


def hash_password(password: str) -> str:
    """Hash password using bcrypt directly."""
    return bcrypt_lib.hashpw(password.encode(), bcrypt_lib.gensalt()).decode()


def main():
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")

    if not email or not password:
        print("Error: ADMIN_EMAIL and ADMIN_PASSWORD must be set in .env")
        sys.exit(1)

    existing = supabase.table("users").select("id").eq("email", email).execute()
    if existing.data:
        print(f"User with email '{email}' already exists.")
        sys.exit(0)

    result = supabase.table("users").insert({
        "name": email.split("@")[0],
        "email": email,
        "password_hash": hash_password(password),
        "full_name": "Administrator",
        "type": "admin",
    }).execute()

    if result.data:
        admin = result.data[0]
        print(f"Created admin:")
        print(f"  ID: {admin['id']}")
        print(f"  Email: {admin['email']}")
        print(f"  Created: {admin['created_at']}")
    else:
        print("Error: Failed to create admin")
        sys.exit(1)


if __name__ == "__main__":
    main()
