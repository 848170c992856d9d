"""Test configuration."""
import asyncio
from pathlib import Path
from typing import AsyncGenerator, Generator, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import Database
from app.main import create_app
from app.schemas.progress import ReviewedQuestion
from app.schemas.user import AccountSeed
from create_database import seed_accounts

ACCOUNTS = [
    AccountSeed(username="bob", password="secret", language="en"),
    AccountSeed(username="carol", password="hunter2", language="all"),
    AccountSeed(username="dave", password="bonjour", language="fr"),
]


def make_question(question_id: str, **overrides) -> ReviewedQuestion:
    data = {
        "id": question_id,
        "text": {"en": f"Question {question_id}", "fr": f"Question {question_id} (fr)"},
        "options": [{"text": {"en": "Yes", "fr": "Oui"}}, {"text": {"en": "No", "fr": "Non"}}],
        "explanation": {"en": "Because.", "fr": "Parce que."},
    }
    data.update(overrides)
    return ReviewedQuestion.model_validate(data)


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
def database_url(database_path: Path) -> str:
    return f"sqlite+aiosqlite:///{database_path}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(DATABASE_URL=database_url, LOG_LEVEL="WARNING", PASSWORD_SCHEME="plaintext")


@pytest.fixture
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    """Fresh database with tables created for each test."""
    database = Database(database_url)
    await database.connect()
    try:
        yield database
    finally:
        await database.dispose()


@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


async def _seed(database_url: str, accounts: List[AccountSeed], scheme: str) -> None:
    database = Database(database_url)
    try:
        await seed_accounts(database, accounts, scheme)
    finally:
        await database.dispose()


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """API client with the standard accounts seeded; runs the app lifespan."""
    asyncio.run(_seed(settings.DATABASE_URL, ACCOUNTS, settings.PASSWORD_SCHEME))
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
