import logging
from typing import List

from topbanana.domain.quiz_domain import OptionData, QuestionData, QuizData
from topbanana.repositories.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)


def _capital_question(city: str, position: int, correct: str, others: List[str]) -> QuestionData:
    options = [OptionData(text=correct, correct=True)]
    options += [OptionData(text=other) for other in others]
    return QuestionData(
        text=f"What is the capital of {city}?", position=position, options=options
    )


def demo_quizzes() -> List[QuizData]:
    return [
        QuizData(
            title="Quiz 1",
            slug="quiz-1",
            description="This is a quiz",
            questions=[
                _capital_question("France", 10, "Paris", ["Berlin", "Madrid", "Rome"]),
                _capital_question("Spain", 20, "Madrid", ["Rome", "Paris", "Berlin"]),
                _capital_question("Germany", 30, "Berlin", ["Paris", "Rome", "Madrid"]),
            ],
        ),
        QuizData(title="Quiz 2", slug="quiz-2", description="This is another quiz"),
    ]


def seed_quizzes(repository: QuizRepository) -> List[QuizData]:
    """Create the demo quizzes whose slug is not taken yet"""
    existing_slugs = {quiz.slug for quiz in repository.list_quizzes()}

    created = []
    for quiz in demo_quizzes():
        if quiz.slug in existing_slugs:
            logger.info(f"Skipping quiz {quiz.slug!r}, already present")
            continue
        created.append(repository.create_quiz(quiz))

    logger.info(f"🌱 Seeded {len(created)} quizzes")
    return created
