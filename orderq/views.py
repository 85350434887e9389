"""
Deterministic view builders over the submission log.

Both builders are reduce_latest over a filtered query, differing only in the
group key and the projection. Nothing is cached; every call recomputes from
the log.
"""

from typing import Iterable, List, Optional

from .core.models import PresenterEntry, ViewerEntry
from .core.reducer import by_answeree, by_question, reduce_latest
from .log.store import SubmissionFilter, SubmissionLog


def build_presenter_view(log: SubmissionLog, session_id: str, question_uid: str) -> List[PresenterEntry]:
    """
    Latest submission of every participant for one question of a session.

    Entries are ordered by each participant's first appearance in the log.
    """
    subs = log.query(SubmissionFilter(session=session_id, question_uid=question_uid))
    latest = reduce_latest(subs, by_answeree)
    return [
        PresenterEntry(participant_id=sub.answeree, submission=sub.submission, submit_date=sub.submit_date)
        for sub in latest.values()
    ]


def build_viewer_view(
    log: SubmissionLog,
    session_id: str,
    participant_id: Optional[str],
    question_uids: Iterable[str],
) -> List[ViewerEntry]:
    """
    Latest submission of one participant for each answered question.

    Questions the participant never answered are absent. Without a
    participant there is nothing to show.
    """
    if not participant_id:
        return []
    flt = SubmissionFilter.for_questions(session_id, question_uids, answeree=participant_id)
    latest = reduce_latest(log.query(flt), by_question)
    return [ViewerEntry(question_uid=sub.question_uid, orders=sub.submission) for sub in latest.values()]


def presenter_payload(entries: List[PresenterEntry]) -> List[dict]:
    return [e.to_payload() for e in entries]


def viewer_payload(entries: List[ViewerEntry]) -> List[dict]:
    return [e.to_payload() for e in entries]
