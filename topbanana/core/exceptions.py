"""Errors raised by the quiz store.

Every error derives from ``StoreError`` so callers can catch the whole family.
Driver errors are never reinterpreted: they are wrapped in ``StoreError`` and
remain reachable through ``__cause__``.
"""


class StoreError(Exception):
    """Base class for quiz store failures"""

    def add_context(self, context: str) -> "StoreError":
        """Prefix the message with the operation that was unwinding when it failed"""
        message = self.args[0] if self.args else ""
        self.args = (f"{context}: {message}",) + tuple(self.args[1:])
        return self


class QuizNotFoundError(StoreError, LookupError):
    def __init__(self, quiz_id: int):
        super().__init__(f"quiz {quiz_id} not found")
        self.quiz_id = quiz_id


class QuestionNotFoundError(StoreError, LookupError):
    def __init__(self, question_id: int):
        super().__init__(f"question {question_id} not found")
        self.question_id = question_id


class NoRowsAffectedError(StoreError):
    """A write by ID matched nothing, the row vanished between load and save"""

    kind = "row"
    action = "updating"

    def __init__(self, entity_id: int):
        super().__init__(f"no rows affected when {self.action} {self.kind} {entity_id}")
        self.entity_id = entity_id


class QuizNotUpdatedError(NoRowsAffectedError):
    kind = "quiz"


class QuestionNotUpdatedError(NoRowsAffectedError):
    kind = "question"


class OptionNotUpdatedError(NoRowsAffectedError):
    kind = "option"


class QuestionNotDeletedError(NoRowsAffectedError):
    kind = "question"
    action = "deleting"


class OptionNotDeletedError(NoRowsAffectedError):
    kind = "option"
    action = "deleting"


class InvalidOperationError(StoreError, ValueError):
    """A precondition failed before any I/O was attempted"""


class TransactionError(StoreError):
    """Beginning or committing a transaction failed"""
