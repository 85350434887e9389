"""
Submission storage.

This module provides:
- SubmissionLog: Abstract interface with append-time validation
- SubmissionFilter: Query-by-filter (exact and in-set matches)
- InMemorySubmissionLog: Process-local append-only storage
- FileSubmissionLog: File-based append-only storage (JSONL)
"""

from .store import SubmissionLog, SubmissionFilter, AppendResult, is_permutation
from .memory_store import InMemorySubmissionLog
from .file_store import FileSubmissionLog

__all__ = [
    "SubmissionLog",
    "SubmissionFilter",
    "AppendResult",
    "is_permutation",
    "InMemorySubmissionLog",
    "FileSubmissionLog",
]
