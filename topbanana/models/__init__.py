from .quiz import Option, Question, Quiz

__all__ = ["Quiz", "Question", "Option"]
