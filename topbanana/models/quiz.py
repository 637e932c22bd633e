from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text

from topbanana.core.database import Base
from topbanana.models.types import MillisecondTimestamp


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=False, server_default="")
    created_at = Column(MillisecondTimestamp, server_default="0")


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True)
    quiz_id = Column(
        Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text = Column(Text, nullable=False, server_default="")
    image_url = Column(Text, nullable=False, server_default="")
    # Ordering key chosen by the author, not checked for uniqueness
    position = Column(Integer, nullable=False)


class Option(Base):
    __tablename__ = "options"

    id = Column(Integer, primary_key=True)
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False)
