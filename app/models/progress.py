from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, JSON
from datetime import datetime
from typing import Any, Optional
import uuid

from app.database import Base


def new_progress_id() -> str:
    return uuid.uuid4().hex


class ReviewProgress(Base):
    __tablename__ = 'reviewed_questions'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_progress_id)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    reviews: Mapped[Any] = mapped_column(JSON, nullable=False, default=list)
    # Nullable for rows written before the index was tracked
    last_reviewed_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=0)
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=1)  # 1 right after insert
