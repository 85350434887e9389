"""
In-memory submission log.

Used by tests and single-process deployments that persist elsewhere.
"""

import threading
from typing import Iterator, List

from .. import QUESTION_TYPE
from ..core.models import Submission
from ..questions import QuestionRepository
from .store import SubmissionLog


class InMemorySubmissionLog(SubmissionLog):
    """
    List-backed append-only log.

    Append holds the lock only while assigning seq and storing the record;
    read iterates over a snapshot taken under the same lock.
    """

    def __init__(self, questions: QuestionRepository, type_tag: str = QUESTION_TYPE) -> None:
        super().__init__(questions, type_tag)
        self._records: List[Submission] = []
        self._lock = threading.Lock()

    def _append_record(self, record: Submission) -> Submission:
        with self._lock:
            stored = record.with_seq(len(self._records))
            self._records.append(stored)
        return stored

    def read(self, from_seq: int = 0) -> Iterator[Submission]:
        with self._lock:
            snapshot = list(self._records)
        for sub in snapshot[from_seq:]:
            yield sub

    def __len__(self) -> int:
        return len(self._records)
