"""
Relational quiz store backed by a single SQLAlchemy table.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Union

from sqlalchemy import DateTime, Integer, String, create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .data_manager import DEFAULT_QUIZZES, QuizStoreError, build_quiz, parse_quiz_id
from .models import Quiz


class Base(DeclarativeBase):
    pass


class QuizRow(Base):
    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question: Mapped[str] = mapped_column(String(512), nullable=False)
    answer: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def to_quiz(self) -> Quiz:
        return Quiz(question=self.question, answer=self.answer)


class SqlQuizStore:
    """Quiz store with the DataManager interface, persisted in a SQL table.

    Ids are positions in the table ordered by primary key, so they stay
    contiguous after deletions exactly like the JSON store.
    """

    def __init__(self, database_url: str = "sqlite:///quizzes.db"):
        self.logger = logging.getLogger(__name__)
        self.database_url = database_url
        self.engine = create_engine(database_url, future=True)
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)
        self.load_errors: List[str] = []
        self.defaults_loaded = False

    def load(self) -> List[Quiz]:
        """Create the table if needed and seed it when empty."""
        self.load_errors.clear()
        self.defaults_loaded = False
        try:
            Base.metadata.create_all(self.engine)
            with self._session_factory.begin() as session:
                existing = session.scalar(select(func.count()).select_from(QuizRow))
                if not existing:
                    session.add_all(
                        QuizRow(question=q["question"], answer=q["answer"])
                        for q in DEFAULT_QUIZZES
                    )
                    self.defaults_loaded = True
                    self.logger.info(f"Seeded {len(DEFAULT_QUIZZES)} default quizzes into {self.database_url}")
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to load quizzes from {self.database_url}: {e}")
            self.load_errors.append(f"{self.database_url}: {e}")
            raise QuizStoreError(f"Cannot load quizzes from {self.database_url}: {e}") from e
        return self.get_all()

    def _rows(self, session: Session) -> List[QuizRow]:
        return list(session.scalars(select(QuizRow).order_by(QuizRow.id)))

    def get_all(self) -> List[Quiz]:
        try:
            with self._session_factory() as session:
                return [row.to_quiz() for row in self._rows(session)]
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to read quizzes: {e}")
            raise QuizStoreError(f"Cannot read quizzes: {e}") from e

    def count(self) -> int:
        try:
            with self._session_factory() as session:
                return session.scalar(select(func.count()).select_from(QuizRow)) or 0
        except SQLAlchemyError as e:
            raise QuizStoreError(f"Cannot count quizzes: {e}") from e

    def get_by_index(self, quiz_id: Union[int, str]) -> Quiz:
        try:
            with self._session_factory() as session:
                rows = self._rows(session)
                return rows[parse_quiz_id(quiz_id, len(rows))].to_quiz()
        except SQLAlchemyError as e:
            raise QuizStoreError(f"Cannot read quiz {quiz_id}: {e}") from e

    def add(self, question: str, answer: str) -> Quiz:
        quiz = build_quiz(question, answer)
        try:
            with self._session_factory.begin() as session:
                session.add(QuizRow(question=quiz.question, answer=quiz.answer))
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to add quiz: {e}")
            raise QuizStoreError(f"Cannot add quiz: {e}") from e
        self.logger.info(f"Added quiz: {quiz.question}")
        return quiz

    def update(self, quiz_id: Union[int, str], question: str, answer: str) -> Quiz:
        try:
            with self._session_factory.begin() as session:
                rows = self._rows(session)
                row = rows[parse_quiz_id(quiz_id, len(rows))]
                quiz = build_quiz(question, answer)
                row.question = quiz.question
                row.answer = quiz.answer
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to update quiz {quiz_id}: {e}")
            raise QuizStoreError(f"Cannot update quiz {quiz_id}: {e}") from e
        self.logger.info(f"Updated quiz {quiz_id}: {quiz.question}")
        return quiz

    def delete_by_index(self, quiz_id: Union[int, str]) -> Quiz:
        try:
            with self._session_factory.begin() as session:
                rows = self._rows(session)
                row = rows[parse_quiz_id(quiz_id, len(rows))]
                quiz = row.to_quiz()
                session.delete(row)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to delete quiz {quiz_id}: {e}")
            raise QuizStoreError(f"Cannot delete quiz {quiz_id}: {e}") from e
        self.logger.info(f"Deleted quiz {quiz_id}: {quiz.question}")
        return quiz

    def get_load_errors(self) -> List[str]:
        return self.load_errors.copy()

    def has_load_errors(self) -> bool:
        return bool(self.load_errors)

    def get_loading_summary(self) -> Dict[str, Any]:
        return {
            'total_quizzes': self.count(),
            'has_errors': self.has_load_errors(),
            'error_count': len(self.load_errors),
            'errors': self.get_load_errors(),
            'defaults_loaded': self.defaults_loaded,
            'source': self.database_url
        }

    def dispose(self) -> None:
        self.engine.dispose()
