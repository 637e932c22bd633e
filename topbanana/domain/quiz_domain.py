from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from topbanana.models.quiz import Option, Question, Quiz


@dataclass
class OptionData:
    """Domain entity for an answer option"""

    text: str = ""
    correct: bool = False
    id: int = 0
    question_id: int = 0

    def valid(self) -> Dict[str, str]:
        problems = {}
        if not self.text:
            problems["text"] = "Text is required"
        return problems


@dataclass
class QuestionData:
    """Domain entity for a question and its options"""

    text: str = ""
    position: int = 0
    image_url: str = ""
    options: List[OptionData] = field(default_factory=list)
    id: int = 0
    quiz_id: int = 0

    def valid(self) -> Dict[str, str]:
        """Check the question itself; options are checked by the owning quiz"""
        problems = {}
        if not self.text:
            problems["text"] = "Text is required"
        if not self.options:
            problems["options"] = "Options are required"
        return problems


@dataclass
class QuizData:
    """Domain entity for a quiz aggregate.

    An ``id`` of 0 at any level means the entity has not been persisted yet.
    The store fills in ids and ``created_at`` in place.
    """

    title: str = ""
    slug: str = ""
    description: str = ""
    questions: List[QuestionData] = field(default_factory=list)
    id: int = 0
    created_at: Optional[datetime] = None

    def valid(self) -> Dict[str, str]:
        """
        Check the quiz, its questions and their options.

        Returns a mapping of field path to problem, empty when valid. Nested
        paths look like ``questions[0][text]`` and ``questions[0].options[1][text]``.
        """
        problems = {}
        if not self.title:
            problems["title"] = "Title is required"
        if not self.slug:
            problems["slug"] = "Slug is required"
        if not self.description:
            problems["description"] = "Description is required"

        for qi, question in enumerate(self.questions):
            for key, problem in question.valid().items():
                problems[f"questions[{qi}][{key}]"] = problem
            for oi, option in enumerate(question.options):
                for key, problem in option.valid().items():
                    problems[f"questions[{qi}].options[{oi}][{key}]"] = problem

        return problems


class QuizDomain:
    """Conversions between ORM rows and domain entities"""

    @staticmethod
    def option_from_row(row: Option) -> OptionData:
        return OptionData(
            id=row.id,
            question_id=row.question_id,
            text=row.text,
            correct=bool(row.is_correct),
        )

    @staticmethod
    def question_from_row(row: Question, options: List[OptionData]) -> QuestionData:
        return QuestionData(
            id=row.id,
            quiz_id=row.quiz_id,
            text=row.text,
            image_url=row.image_url or "",
            position=row.position,
            options=options,
        )

    @staticmethod
    def quiz_from_row(row: Quiz, questions: List[QuestionData]) -> QuizData:
        return QuizData(
            id=row.id,
            title=row.title,
            slug=row.slug,
            description=row.description,
            created_at=row.created_at,
            questions=questions,
        )

    @staticmethod
    def reset_ids(quiz: QuizData) -> None:
        """Forget every identifier in the aggregate so it is stored as new"""
        quiz.id = 0
        for question in quiz.questions:
            QuizDomain.reset_question_ids(question)

    @staticmethod
    def reset_question_ids(question: QuestionData) -> None:
        question.id = 0
        for option in question.options:
            option.id = 0
