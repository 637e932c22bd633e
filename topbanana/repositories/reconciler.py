import logging
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from topbanana.core.exceptions import (
    NoRowsAffectedError,
    OptionNotDeletedError,
    OptionNotUpdatedError,
    QuestionNotDeletedError,
    QuestionNotUpdatedError,
    StoreError,
)
from topbanana.domain.quiz_domain import OptionData, QuestionData
from topbanana.models.quiz import Option, Question

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChildReconciler(ABC, Generic[T]):
    """
    Make the rows stored under one parent match a desired list of children.

    Subclasses supply the table-specific operations; the algorithm is shared:
    read the ids currently stored under the parent, create every child whose
    id is 0, update the rest by id, then delete whatever was stored but not
    claimed by the desired list. Must run inside an open transaction.
    """

    kind: str = "child"
    parent_kind: str = "parent"
    not_updated_error: Type[NoRowsAffectedError] = NoRowsAffectedError
    not_deleted_error: Type[NoRowsAffectedError] = NoRowsAffectedError

    def __init__(self, db: Session):
        self.db = db

    @abstractmethod
    def existing_ids(self, parent_id: int) -> List[int]:
        """Ids currently stored under the parent"""

    @abstractmethod
    def attach(self, child: T, parent_id: int) -> None:
        """Point the child at its parent, overwriting what the caller set"""

    @abstractmethod
    def parent_of(self, child: T) -> int:
        """The parent id the child currently points at"""

    @abstractmethod
    def create(self, child: T) -> None:
        """Insert the child and assign its new id"""

    @abstractmethod
    def update(self, child: T, parent_id: Optional[int]) -> int:
        """Update the child's row and return the number of rows affected"""

    @abstractmethod
    def delete(self, child_id: int) -> int:
        """Delete the child's row and return the number of rows affected"""

    def reset_children(self, child: T) -> None:
        """Zero the ids below a child that is about to be created"""

    def after_upsert(self, child: T) -> None:
        """Hook for reconciling the next level down"""

    def upsert(self, child: T, parent_id: Optional[int] = None) -> None:
        """
        Create the child if its id is 0, otherwise update it.

        ``parent_id`` scopes the update to rows owned by that parent; pass None
        to update by id alone.
        """
        if child.id == 0:
            self.reset_children(child)
            try:
                self.create(child)
            except SQLAlchemyError as e:
                raise StoreError(
                    f"failed to create {self.kind} under {self.parent_kind} "
                    f"{self.parent_of(child)}"
                ) from e
            logger.debug(f"Created {self.kind} {child.id}")
        else:
            try:
                rows = self.update(child, parent_id)
            except SQLAlchemyError as e:
                raise StoreError(
                    f"failed to update {self.kind} {child.id} under "
                    f"{self.parent_kind} {self.parent_of(child)}"
                ) from e
            if rows == 0:
                raise self.not_updated_error(child.id)
            logger.debug(f"Updated {self.kind} {child.id}")

        try:
            self.after_upsert(child)
        except StoreError as e:
            raise e.add_context(f"error upserting {self.kind} {child.id}")

    def reconcile(self, parent_id: int, desired: Sequence[T]) -> List[int]:
        """Apply the desired children under ``parent_id`` and return the deleted ids"""
        try:
            existing = self.existing_ids(parent_id)
        except SQLAlchemyError as e:
            raise StoreError(
                f"failed to list existing {self.kind} ids for "
                f"{self.parent_kind} {parent_id}"
            ) from e

        kept = set()
        for child in desired:
            self.attach(child, parent_id)
            if child.id != 0:
                kept.add(child.id)
            self.upsert(child, parent_id)

        stale = sorted(set(existing) - kept)
        for child_id in stale:
            try:
                rows = self.delete(child_id)
            except SQLAlchemyError as e:
                raise StoreError(
                    f"failed to delete {self.kind} {child_id} under "
                    f"{self.parent_kind} {parent_id}"
                ) from e
            if rows == 0:
                raise self.not_deleted_error(child_id)
            logger.debug(f"Deleted {self.kind} {child_id}")

        return stale


class OptionReconciler(ChildReconciler[OptionData]):
    kind = "option"
    parent_kind = "question"
    not_updated_error = OptionNotUpdatedError
    not_deleted_error = OptionNotDeletedError

    def existing_ids(self, parent_id: int) -> List[int]:
        rows = self.db.query(Option.id).filter(Option.question_id == parent_id).all()
        return [row.id for row in rows]

    def attach(self, child: OptionData, parent_id: int) -> None:
        child.question_id = parent_id

    def parent_of(self, child: OptionData) -> int:
        return child.question_id

    def create(self, child: OptionData) -> None:
        db_option = Option(
            question_id=child.question_id,
            text=child.text,
            is_correct=child.correct,
        )
        self.db.add(db_option)
        self.db.flush()
        child.id = db_option.id

    def update(self, child: OptionData, parent_id: Optional[int]) -> int:
        query = self.db.query(Option).filter(Option.id == child.id)
        if parent_id is not None:
            query = query.filter(Option.question_id == parent_id)
        return query.update(
            {Option.text: child.text, Option.is_correct: child.correct},
            synchronize_session=False,
        )

    def delete(self, child_id: int) -> int:
        return self.db.query(Option).filter(Option.id == child_id).delete(
            synchronize_session=False
        )


class QuestionReconciler(ChildReconciler[QuestionData]):
    kind = "question"
    parent_kind = "quiz"
    not_updated_error = QuestionNotUpdatedError
    not_deleted_error = QuestionNotDeletedError

    def existing_ids(self, parent_id: int) -> List[int]:
        rows = self.db.query(Question.id).filter(Question.quiz_id == parent_id).all()
        return [row.id for row in rows]

    def attach(self, child: QuestionData, parent_id: int) -> None:
        child.quiz_id = parent_id

    def parent_of(self, child: QuestionData) -> int:
        return child.quiz_id

    def create(self, child: QuestionData) -> None:
        db_question = Question(
            quiz_id=child.quiz_id,
            text=child.text,
            image_url=child.image_url,
            position=child.position,
        )
        self.db.add(db_question)
        self.db.flush()
        child.id = db_question.id

    def update(self, child: QuestionData, parent_id: Optional[int]) -> int:
        query = self.db.query(Question).filter(Question.id == child.id)
        if parent_id is not None:
            query = query.filter(Question.quiz_id == parent_id)
        rows = query.update(
            {
                Question.text: child.text,
                Question.image_url: child.image_url,
                Question.position: child.position,
            },
            synchronize_session=False,
        )
        if rows and parent_id is None:
            # Updated by id alone: report the owner actually stored
            child.quiz_id = (
                self.db.query(Question.quiz_id).filter(Question.id == child.id).scalar()
            )
        return rows

    def delete(self, child_id: int) -> int:
        # Options go with it through ON DELETE CASCADE
        return self.db.query(Question).filter(Question.id == child_id).delete(
            synchronize_session=False
        )

    def reset_children(self, child: QuestionData) -> None:
        for option in child.options:
            option.id = 0

    def after_upsert(self, child: QuestionData) -> None:
        OptionReconciler(self.db).reconcile(child.id, child.options)
