from .quiz_repository import QuizRepository
from .reconciler import ChildReconciler, OptionReconciler, QuestionReconciler

__all__ = ["QuizRepository", "ChildReconciler", "QuestionReconciler", "OptionReconciler"]
