"""
Core primitives for the ordering question engine.

This module provides:
- Question / Submission: Immutable domain records
- reduce_latest: Pure latest-wins reduction
- Canonical: Deterministic serialization
- Clock: Millisecond time sources
- Errors: Submission rejection taxonomy
"""

from .models import Question, Submission, SubmissionRequest, PresenterEntry, ViewerEntry
from .reducer import reduce_latest, by_answeree, by_question, by_answeree_and_question
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .clock import SystemClock, FixedClock
from .ids import new_uid
from .errors import (
    SubmissionValidationError,
    SchemaError,
    TypeMismatchError,
    MalformedSubmissionError,
    SubmissionLogError,
    UnknownHookError,
)

__all__ = [
    "Question",
    "Submission",
    "SubmissionRequest",
    "PresenterEntry",
    "ViewerEntry",
    "reduce_latest",
    "by_answeree",
    "by_question",
    "by_answeree_and_question",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "SystemClock",
    "FixedClock",
    "new_uid",
    "SubmissionValidationError",
    "SchemaError",
    "TypeMismatchError",
    "MalformedSubmissionError",
    "SubmissionLogError",
    "UnknownHookError",
]
