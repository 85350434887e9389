"""
Question resolution.

Question definitions are produced elsewhere (markup extraction is not part of
this engine). The repository is the lookup surface the log and the reconnect
coordinator depend on.
"""

import json
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .core.models import Question


class QuestionRepository(ABC):
    """Read access to question definitions plus registration of new ones."""

    @abstractmethod
    def get_question_by_id(self, uid: str) -> Optional[Question]:
        ...

    @abstractmethod
    def get_questions_by_type_for_presentation(
        self, presentation_id: str, type_tag: str
    ) -> List[Question]:
        """
        Questions of one type belonging to a presentation, in definition order.
        """
        ...

    @abstractmethod
    def add(self, question: Question) -> None:
        ...


class InMemoryQuestionRepository(QuestionRepository):
    """
    Dict-backed repository.

    Re-adding a uid replaces the definition but keeps its original position.
    """

    def __init__(self, questions: Optional[List[Question]] = None) -> None:
        self._questions: Dict[str, Question] = {}
        self._lock = threading.Lock()
        for q in questions or []:
            self.add(q)

    def get_question_by_id(self, uid: str) -> Optional[Question]:
        return self._questions.get(uid)

    def get_questions_by_type_for_presentation(
        self, presentation_id: str, type_tag: str
    ) -> List[Question]:
        with self._lock:
            questions = list(self._questions.values())
        return [
            q for q in questions
            if q.presentation_id == presentation_id and q.type == type_tag
        ]

    def add(self, question: Question) -> None:
        with self._lock:
            self._questions[question.uid] = question


def load_questions(path: str) -> InMemoryQuestionRepository:
    """
    Load question definitions from a JSON file.

    The file holds a list of objects with uid, type, presentation_id, items
    and optionally stem.
    """
    with open(path, "r") as f:
        data = json.load(f)
    return InMemoryQuestionRepository([Question.from_dict(d) for d in data])
