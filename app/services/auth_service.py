"""
Access gate: credential check plus assigned-language restriction.

How a presented password is compared with the stored one is delegated to a
CredentialVerifier, so the storage scheme can change without touching
authenticate().
"""
from typing import Optional, Protocol
import logging

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import STORE_FAILURES, store_error
from app.exceptions import InvalidCredentials, LanguageNotAssigned, ValidationError
from app.models.user import UserAccount
from app.schemas.user import AccountSeed, LoginOut

logger = logging.getLogger(__name__)

PLAINTEXT = "plaintext"


class CredentialVerifier(Protocol):
    def verify(self, presented: str, stored: str) -> bool:
        ...

    def prepare(self, password: str) -> str:
        """Value to store for a new password."""
        ...


class PlaintextVerifier:
    """Verbatim comparison against a password stored as-is."""

    def verify(self, presented: str, stored: str) -> bool:
        return presented == stored

    def prepare(self, password: str) -> str:
        return password


class PasslibVerifier:
    """Compares against hashes produced by a passlib CryptContext."""

    def __init__(self, scheme: str = "pbkdf2_sha256"):
        self.pwd_context = CryptContext(schemes=[scheme], deprecated="auto")

    def verify(self, presented: str, stored: str) -> bool:
        try:
            return self.pwd_context.verify(presented, stored)
        except ValueError:
            # Stored value is not a hash this context understands
            return False

    def prepare(self, password: str) -> str:
        return self.pwd_context.hash(password)


def get_verifier(scheme: str) -> CredentialVerifier:
    if not scheme or scheme == PLAINTEXT:
        return PlaintextVerifier()
    return PasslibVerifier(scheme)


async def get_account(db: AsyncSession, username: str) -> Optional[UserAccount]:
    try:
        result = await db.execute(select(UserAccount).where(UserAccount.username == username))
    except STORE_FAILURES as e:
        logger.exception("Error looking up account %s", username)
        raise store_error(e) from e
    return result.scalar_one_or_none()


async def authenticate(
    db: AsyncSession,
    username: str,
    password: str,
    selected_language: str,
    verifier: CredentialVerifier
) -> LoginOut:
    """Authenticate a user for the selected language

    Raises:
        InvalidCredentials: unknown username or wrong password (same message)
        LanguageNotAssigned: account is restricted to another language
    """
    user = await get_account(db, username)

    if not user or not verifier.verify(password, user.password):
        logger.info("Login rejected for %s: invalid credentials", username)
        raise InvalidCredentials()

    if not user.is_unrestricted and user.language != selected_language:
        logger.info(
            "Login rejected for %s: language %s not assigned", username, selected_language
        )
        raise LanguageNotAssigned()

    logger.info("Login accepted for %s (%s)", user.username, selected_language)
    return LoginOut(username=user.username, selected_language=selected_language)


async def save_account(
    db: AsyncSession,
    seed: AccountSeed,
    verifier: CredentialVerifier
) -> UserAccount:
    """Create an account, or reset password and language of an existing one"""
    if not seed.username or not seed.language:
        raise ValidationError("Username and language are required.")

    user = await get_account(db, seed.username)
    if not user:
        user = UserAccount(username=seed.username)
        db.add(user)

    user.password = verifier.prepare(seed.password)
    user.language = seed.language

    try:
        await db.commit()
        await db.refresh(user)
    except STORE_FAILURES as e:
        await db.rollback()
        raise store_error(e) from e
    return user
