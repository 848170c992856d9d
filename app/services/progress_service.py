"""
Review progress store: one progress document per username.

Saves are a single INSERT ... ON CONFLICT DO UPDATE statement, so concurrent
saves for the same user resolve in the database (last write wins) and the
created/updated outcome comes from the same statement that wrote the row.
"""
from enum import Enum
from datetime import datetime, timezone
from typing import List, Sequence
import logging

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import case, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import STORE_FAILURES, store_error
from app.exceptions import ProgressNotFound, StoreError, ValidationError
from app.models.progress import ReviewProgress, new_progress_id
from app.schemas.progress import ProgressOut, ReviewedQuestion

logger = logging.getLogger(__name__)


class SaveOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


def _insert_for(db: AsyncSession):
    # PostgreSQL needs the optional asyncpg driver (the "postgres" extra)
    dialect = db.bind.dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise StoreError(f"Upsert is not supported for the '{dialect}' database")


async def save_progress(
    db: AsyncSession,
    username: str,
    reviews: Sequence[ReviewedQuestion],
    last_reviewed_index: int = 0
) -> SaveOutcome:
    """
    Create or replace the progress document for a user

    Args:
        db: Database session
        username: Lookup key of the document
        reviews: Reviewed question snapshots, must not be empty
        last_reviewed_index: Position marker into reviews

    Returns:
        SaveOutcome.CREATED on the first save for this user, UPDATED afterwards

    Raises:
        ValidationError: username or reviews missing, or negative index
        StoreError: the write failed; nothing was changed
    """
    if not username or not username.strip() or not reviews:
        raise ValidationError()
    if last_reviewed_index is None or last_reviewed_index < 0:
        raise ValidationError("lastReviewedIndex must be zero or greater.")

    payload = [review.model_dump(mode="json") for review in reviews]
    now = datetime.now(timezone.utc)

    insert = _insert_for(db)
    stmt = insert(ReviewProgress).values(
        id=new_progress_id(),
        username=username,
        reviews=payload,
        last_reviewed_index=last_reviewed_index,
        last_modified=now,
        revision=1,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[ReviewProgress.username],
        set_={
            "reviews": stmt.excluded.reviews,
            "last_reviewed_index": stmt.excluded.last_reviewed_index,
            # Never move last_modified backwards, even if the clock does
            "last_modified": case(
                (ReviewProgress.last_modified > stmt.excluded.last_modified, ReviewProgress.last_modified),
                else_=stmt.excluded.last_modified,
            ),
            "revision": ReviewProgress.revision + 1,
        },
    ).returning(ReviewProgress.revision)

    try:
        result = await db.execute(stmt)
        revision = result.scalar_one()
        await db.commit()
    except STORE_FAILURES as e:
        await db.rollback()
        logger.exception("Error saving reviews for %s", username)
        raise store_error(e) from e

    outcome = SaveOutcome.CREATED if revision == 1 else SaveOutcome.UPDATED
    logger.info(
        "Progress %s for %s (%d reviews, last index %d)",
        outcome.value, username, len(payload), last_reviewed_index
    )
    return outcome


def _load_reviews(username: str, stored) -> List[ReviewedQuestion]:
    """Deserialize stored entries, skipping the ones that no longer validate."""
    if stored is None:
        return []
    if not isinstance(stored, list):
        logger.warning("Ignoring non-list reviews stored for %s", username)
        return []

    reviews = []
    for position, entry in enumerate(stored):
        try:
            reviews.append(ReviewedQuestion.model_validate(entry))
        except SchemaValidationError as e:
            logger.warning(
                "Skipping malformed review #%d for %s: %s",
                position, username, e.errors(include_url=False)
            )
    return reviews


async def fetch_progress(db: AsyncSession, username: str) -> ProgressOut:
    """
    Get the stored progress for a user

    Raises:
        ValidationError: username is empty
        ProgressNotFound: nothing was ever saved for this user
        StoreError: the read failed
    """
    if not username or not username.strip():
        raise ValidationError("Username is required.")

    try:
        result = await db.execute(
            select(ReviewProgress).where(ReviewProgress.username == username)
        )
        progress = result.scalar_one_or_none()
    except STORE_FAILURES as e:
        logger.exception("Error retrieving reviews for %s", username)
        raise store_error(e) from e

    if progress is None:
        raise ProgressNotFound(username)

    return ProgressOut(
        last_reviewed_index=progress.last_reviewed_index or 0,
        reviews=_load_reviews(username, progress.reviews),
    )
