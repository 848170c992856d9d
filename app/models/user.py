from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer
from app.database import Base

ALL_LANGUAGES = 'all'


class UserAccount(Base):
    __tablename__ = 'review_users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String, nullable=False)  # as produced by the verifier
    language: Mapped[str] = mapped_column(String, nullable=False, default=ALL_LANGUAGES)

    @property
    def is_unrestricted(self) -> bool:
        return self.language == ALL_LANGUAGES
