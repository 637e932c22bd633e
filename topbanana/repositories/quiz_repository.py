import logging
from typing import Callable, List

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from topbanana.core.database import run_in_transaction
from topbanana.core.exceptions import (
    InvalidOperationError,
    QuestionNotFoundError,
    QuizNotFoundError,
    QuizNotUpdatedError,
    StoreError,
)
from topbanana.domain.quiz_domain import OptionData, QuestionData, QuizData, QuizDomain
from topbanana.models.quiz import Option, Question, Quiz
from topbanana.models.types import utc_now_ms
from topbanana.repositories.reconciler import QuestionReconciler

logger = logging.getLogger(__name__)


class QuizRepository:
    """
    Store for quiz aggregates (quiz -> questions -> options).

    Reads assemble the full aggregate from flat rows. Writes take an aggregate,
    make the stored rows match it in a single transaction, and attach the
    assigned ids to the objects passed in. If a write fails nothing is
    persisted, although the passed aggregate may already carry new ids.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def ping(self) -> None:
        """Check that the database is reachable"""
        try:
            with self.session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StoreError("failed to ping database") from e

    # Reads

    def list_quizzes(self) -> List[QuizData]:
        """Get every quiz with its questions and options"""
        try:
            with self.session_factory() as db:
                rows = db.query(Quiz).order_by(Quiz.id).all()
                return [
                    QuizDomain.quiz_from_row(row, self._load_questions(db, row.id))
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise StoreError("failed to list quizzes") from e

    def get_quiz(self, quiz_id: int) -> QuizData:
        """Get a quiz by ID, raising QuizNotFoundError if there is none"""
        try:
            with self.session_factory() as db:
                row = db.query(Quiz).filter(Quiz.id == quiz_id).first()
                if row is None:
                    raise QuizNotFoundError(quiz_id)
                return QuizDomain.quiz_from_row(row, self._load_questions(db, row.id))
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get quiz {quiz_id}") from e

    def get_question(self, question_id: int) -> QuestionData:
        """Get a question by ID, raising QuestionNotFoundError if there is none"""
        try:
            with self.session_factory() as db:
                row = db.query(Question).filter(Question.id == question_id).first()
                if row is None:
                    raise QuestionNotFoundError(question_id)
                return QuizDomain.question_from_row(row, self._load_options(db, row.id))
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get question {question_id}") from e

    def _load_questions(self, db: Session, quiz_id: int) -> List[QuestionData]:
        rows = (
            db.query(Question)
            .filter(Question.quiz_id == quiz_id)
            .order_by(Question.id)
            .all()
        )
        return [
            QuizDomain.question_from_row(row, self._load_options(db, row.id))
            for row in rows
        ]

    def _load_options(self, db: Session, question_id: int) -> List[OptionData]:
        rows = (
            db.query(Option)
            .filter(Option.question_id == question_id)
            .order_by(Option.id)
            .all()
        )
        return [QuizDomain.option_from_row(row) for row in rows]

    # Writes

    def create_quiz(self, quiz: QuizData) -> QuizData:
        """Store a new quiz; ids supplied by the caller are ignored"""
        QuizDomain.reset_ids(quiz)
        run_in_transaction(self.session_factory, lambda db: self._upsert_quiz(db, quiz))
        logger.info(f"✅ Created quiz {quiz.id} ({quiz.slug})")
        return quiz

    def update_quiz(self, quiz: QuizData) -> QuizData:
        """Make the stored quiz, its questions and their options match ``quiz``"""
        if quiz.id == 0:
            raise InvalidOperationError("cannot update quiz with ID 0")
        run_in_transaction(self.session_factory, lambda db: self._upsert_quiz(db, quiz))
        logger.info(f"✅ Updated quiz {quiz.id}")
        return quiz

    def create_question(self, question: QuestionData) -> QuestionData:
        """Store a new question under ``question.quiz_id``"""
        QuizDomain.reset_question_ids(question)
        run_in_transaction(
            self.session_factory,
            lambda db: QuestionReconciler(db).upsert(question),
        )
        logger.info(f"✅ Created question {question.id} in quiz {question.quiz_id}")
        return question

    def update_question(self, question: QuestionData) -> QuestionData:
        """Make the stored question and its options match ``question``"""
        if question.id == 0:
            raise InvalidOperationError("cannot update question with ID 0")
        run_in_transaction(
            self.session_factory,
            lambda db: QuestionReconciler(db).upsert(question),
        )
        logger.info(f"✅ Updated question {question.id}")
        return question

    def _upsert_quiz(self, db: Session, quiz: QuizData) -> None:
        if quiz.id == 0:
            created_at = utc_now_ms()
            db_quiz = Quiz(
                title=quiz.title,
                slug=quiz.slug,
                description=quiz.description,
                created_at=created_at,
            )
            try:
                db.add(db_quiz)
                db.flush()
            except SQLAlchemyError as e:
                raise StoreError(f"failed to create quiz (title: {quiz.title!r})") from e
            quiz.id = db_quiz.id
            quiz.created_at = created_at
        else:
            try:
                rows = (
                    db.query(Quiz)
                    .filter(Quiz.id == quiz.id)
                    .update(
                        {
                            Quiz.title: quiz.title,
                            Quiz.slug: quiz.slug,
                            Quiz.description: quiz.description,
                        },
                        synchronize_session=False,
                    )
                )
            except SQLAlchemyError as e:
                raise StoreError(f"failed to update quiz {quiz.id}") from e
            if rows == 0:
                raise QuizNotUpdatedError(quiz.id)

        try:
            QuestionReconciler(db).reconcile(quiz.id, quiz.questions)
        except StoreError as e:
            raise e.add_context(f"error upserting quiz {quiz.id}")
