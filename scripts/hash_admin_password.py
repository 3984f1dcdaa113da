"""
Script to generate ADMIN_PASSWORD_HASH for the admin console.

Usage:
    python scripts/hash_admin_password.py <password>

Prints a bcrypt hash to put into .env as ADMIN_PASSWORD_HASH.
"""

import sys

import bcrypt
from loguru import logger

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")

MIN_ADMIN_PASSWORD_LENGTH = 12


def main() -> None:
    if len(sys.argv) != 2:
        logger.error("Usage: python scripts/hash_admin_password.py <password>")
        sys.exit(1)

    password = sys.argv[1]
    if len(password) < MIN_ADMIN_PASSWORD_LENGTH:
        logger.error(
            f"Admin password must be at least {MIN_ADMIN_PASSWORD_LENGTH} characters"
        )
        sys.exit(1)

    hashed = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12))
    print(f"ADMIN_PASSWORD_HASH={hashed.decode()}")


if __name__ == "__main__":
    main()
