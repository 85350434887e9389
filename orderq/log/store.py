"""
SubmissionLog abstract interface.

Defines the contract for submission storage implementations and the
validation every append goes through.
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, List, Optional

from .. import QUESTION_TYPE
from ..core.errors import MalformedSubmissionError, SchemaError, TypeMismatchError
from ..core.models import Question, Submission
from ..questions import QuestionRepository


@dataclass(frozen=True)
class AppendResult:
    """
    Result of a committed append.

    Fields:
        submission: Stored record (seq assigned)
        question: Question the record was validated against
    """
    submission: Submission
    question: Question

    @property
    def seq(self) -> int:
        return self.submission.require_seq()


@dataclass(frozen=True)
class SubmissionFilter:
    """
    Exact-match query filter. None fields do not filter.

    question_uids is an in-set match; an empty set matches nothing.
    """
    session: Optional[str] = None
    question_uid: Optional[str] = None
    answeree: Optional[str] = None
    question_uids: Optional[FrozenSet[str]] = None

    @staticmethod
    def for_questions(session: str, question_uids: Iterable[str], answeree: Optional[str] = None) -> "SubmissionFilter":
        return SubmissionFilter(session=session, answeree=answeree, question_uids=frozenset(question_uids))

    def matches(self, sub: Submission) -> bool:
        if self.session is not None and sub.session != self.session:
            return False
        if self.question_uid is not None and sub.question_uid != self.question_uid:
            return False
        if self.answeree is not None and sub.answeree != self.answeree:
            return False
        if self.question_uids is not None and sub.question_uid not in self.question_uids:
            return False
        return True


def is_permutation(order: Iterable[str], items: Iterable[str]) -> bool:
    """Same length and same multiset."""
    return Counter(order) == Counter(items)


class SubmissionLog(ABC):
    """
    Abstract submission storage interface.

    All implementations must guarantee:
    - Append-only (no updates, no deletes)
    - Log order (records indexed by seq, total even when submit_date collides)
    - Read-after-write (a completed append is visible to the next query)
    - All-or-nothing append (a reader never sees a partial record)
    """

    def __init__(self, questions: QuestionRepository, type_tag: str = QUESTION_TYPE) -> None:
        self.questions = questions
        self.type_tag = type_tag

    def validate(self, record: Submission) -> Question:
        """
        Check a record against its question before it may be written.

        Returns:
            The resolved Question

        Raises:
            SchemaError: Question uid does not resolve
            TypeMismatchError: Question is of another type
            MalformedSubmissionError: Order is not a permutation of the items
        """
        question = self.questions.get_question_by_id(record.question_uid)
        if question is None:
            raise SchemaError(f"Could not find question with id {record.question_uid}")
        if question.type != self.type_tag:
            raise TypeMismatchError(
                f"Question {question.uid} is of type {question.type}, not {self.type_tag}"
            )
        if not is_permutation(record.submission, question.items):
            raise MalformedSubmissionError(
                f"Submission for question {question.uid} is not a permutation of its items"
            )
        return question

    def append(self, record: Submission) -> AppendResult:
        """
        Validate and append a record (seq will be assigned).

        Raises:
            SubmissionValidationError subclasses: record rejected, log unchanged
            SubmissionLogError: storage failure
        """
        question = self.validate(record)
        stored = self._append_record(record)
        return AppendResult(submission=stored, question=question)

    @abstractmethod
    def _append_record(self, record: Submission) -> Submission:
        """
        Write an already validated record atomically.

        Returns:
            Stored record with seq assigned
        """
        ...

    @abstractmethod
    def read(self, from_seq: int = 0) -> Iterator[Submission]:
        """
        Read records from log.

        Args:
            from_seq: Start from this sequence number (inclusive)

        Yields:
            Records in log order
        """
        ...

    def query(self, flt: SubmissionFilter) -> List[Submission]:
        """
        Records matching flt, in log order.
        """
        if flt.question_uids is not None and not flt.question_uids:
            return []
        return [sub for sub in self.read() if flt.matches(sub)]
