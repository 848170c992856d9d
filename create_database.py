"""
Database initialization script
Creates the tables and loads review user accounts from a JSON file

Usage: python create_database.py [accounts.json]

The file holds a list of {"username": ..., "password": ..., "language": ...}
objects; language is a language code or "all".
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import List

from app.config import get_settings
from app.database import Database
from app.schemas.user import AccountSeed
from app.services.auth_service import get_verifier, save_account


def load_accounts(json_path: Path) -> List[AccountSeed]:
    """Read account seeds from a JSON file"""
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return [AccountSeed.model_validate(item) for item in data]


async def seed_accounts(database: Database, accounts: List[AccountSeed], scheme: str) -> int:
    """Create tables and upsert every account, returns the number saved"""
    await database.connect()
    verifier = get_verifier(scheme)

    async with database.session() as session:
        for account in accounts:
            await save_account(session, account, verifier)
            print(f"Saved account: {account.username} ({account.language})")
    return len(accounts)


async def main(json_path: Path):
    settings = get_settings()
    database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    try:
        accounts = load_accounts(json_path) if json_path.exists() else []
        if not accounts:
            print(f"No accounts loaded from {json_path}")
        count = await seed_accounts(database, accounts, settings.PASSWORD_SCHEME)
    finally:
        await database.dispose()

    print(f"\nDatabase ready: {settings.DATABASE_URL}")
    print(f"Accounts saved: {count}")


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("accounts.json")
    asyncio.run(main(path))
