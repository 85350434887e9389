"""
Latest-state reducer: "current submission" per grouping key.

The reducer is the heart of reconstruction. It must be:
- Pure (no side effects, no I/O)
- Deterministic (same input sequence -> same output)
- Uniform (every view uses the same latest-wins rule)

Latest wins by submit_date; on equal submit_date the record that comes later
in the input sequence wins. Callers pass records in log order.
"""

from typing import Callable, Dict, Hashable, Iterable, Tuple

from .models import Submission

KeyFn = Callable[[Submission], Hashable]


def by_answeree(sub: Submission) -> str:
    return sub.answeree


def by_question(sub: Submission) -> str:
    return sub.question_uid


def by_answeree_and_question(sub: Submission) -> Tuple[str, str]:
    return (sub.answeree, sub.question_uid)


def reduce_latest(submissions: Iterable[Submission], key_fn: KeyFn) -> Dict[Hashable, Submission]:
    """
    Reduce submissions to the latest one per group key.

    Single pass, O(n). The returned dict preserves the order in which each key
    was first seen, so output order is stable for identical input.

    Args:
        submissions: Records in log order
        key_fn: Maps a record to its group key

    Returns:
        Dict of group key -> latest Submission
    """
    latest: Dict[Hashable, Submission] = {}
    for sub in submissions:
        key = key_fn(sub)
        held = latest.get(key)
        # >= makes the later record win a timestamp tie
        if held is None or sub.submit_date >= held.submit_date:
            latest[key] = sub
    return latest
