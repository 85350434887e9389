"""
File-based submission log using append-only JSONL format.

Each line is one canonical-JSON submission record.
"""

import json
import os
from typing import Iterator

from ..core.canonical import canonical_json_str
from ..core.errors import SubmissionLogError
from .. import QUESTION_TYPE
from ..core.models import Submission
from ..questions import QuestionRepository
from .store import SubmissionLog

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


class FileSubmissionLog(SubmissionLog):
    """
    File-based append-only submission log.

    Storage format: JSONL (newline-delimited JSON)

    Guarantees:
    - Append-only (no mutations)
    - Fsync after each append (durability)
    - Exclusive file lock while seq is assigned and the line is written
    """

    def __init__(self, path: str, questions: QuestionRepository, type_tag: str = QUESTION_TYPE) -> None:
        """
        Initialize file submission log.

        Args:
            path: Path to JSONL file
            questions: Repository used to validate appends
        """
        super().__init__(questions, type_tag)
        self.path = path

        # Ensure directory exists
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        # Create empty file if not exists
        if not os.path.exists(path):
            with open(path, "wb") as f:
                f.write(b"")

    def _next_seq(self, f) -> int:
        """
        Count complete records, cutting off any unterminated tail first.

        Called with the exclusive lock held, so a tail without newline is
        left by a writer that died mid-append, never one still in flight.
        """
        f.seek(0)
        data = f.read()
        complete = data.rfind(b"\n") + 1
        if complete < len(data):
            f.truncate(complete)
        return sum(1 for line in data[:complete].split(b"\n") if line.strip())

    def _append_record(self, record: Submission) -> Submission:
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    stored = record.with_seq(self._next_seq(f))
                    line = canonical_json_str(stored.to_dict()) + "\n"

                    f.seek(0, os.SEEK_END)
                    f.write(line.encode("utf-8"))
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return stored
        except OSError as ex:
            raise SubmissionLogError(str(ex)) from ex

    def read(self, from_seq: int = 0) -> Iterator[Submission]:
        """
        Read records from log.

        A trailing line without newline is an append still in flight and is
        skipped.

        Yields:
            Records in log order
        """
        try:
            with open(self.path, "rb") as f:
                data = f.read()
        except OSError as ex:
            raise SubmissionLogError(str(ex)) from ex

        for line in data.split(b"\n")[:-1]:
            if not line.strip():
                continue
            try:
                sub = Submission.from_dict(json.loads(line))
            except (ValueError, KeyError) as ex:
                raise SubmissionLogError(f"corrupt record in {self.path}: {ex}") from ex
            if sub.require_seq() < from_seq:
                continue
            yield sub
