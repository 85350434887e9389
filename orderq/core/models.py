"""
Domain records for the ordering question type.

Question and Submission are immutable. A correction is a new Submission with a
later submit_date for the same (question, answeree, session) key; nothing is
ever rewritten.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Question:
    """
    Immutable question definition.

    Fields:
        uid: Globally unique within a presentation
        type: Question type tag (e.g., "asq-order-q")
        items: Orderable item identifiers, in authored order
        presentation_id: Owning presentation
        stem: Question text (may contain markup)
    """
    uid: str
    type: str
    items: Tuple[str, ...] = ()
    presentation_id: Optional[str] = None
    stem: str = ""

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Question":
        return Question(
            uid=str(data["uid"]),
            type=str(data["type"]),
            items=tuple(data.get("items") or ()),
            presentation_id=data.get("presentation_id"),
            stem=data.get("stem") or "",
        )


@dataclass(frozen=True)
class Submission:
    """
    Immutable submission record.

    Fields:
        question_uid: Question the order was submitted for
        answeree: Participant identity
        session: Session identity
        submission: Proposed order of item identifiers
        submit_date: Epoch milliseconds, stamped at ingest
        exercise_id: Enclosing exercise, if any
        confidence: Optional self-reported confidence
        type: Question type tag copied from the question
        seq: Log position (assigned by SubmissionLog)
    """
    question_uid: str
    answeree: str
    session: str
    submission: Tuple[str, ...]
    submit_date: int
    exercise_id: Optional[str] = None
    confidence: Optional[int] = None
    type: Optional[str] = None
    seq: Optional[int] = None

    def require_seq(self) -> int:
        """
        Get log position or raise error if not assigned.

        Raises:
            ValueError: If seq is None
        """
        if self.seq is None:
            raise ValueError("Submission.seq is required but None")
        return self.seq

    def with_seq(self, seq: int) -> "Submission":
        return replace(self, seq=seq)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_uid": self.question_uid,
            "answeree": self.answeree,
            "session": self.session,
            "submission": list(self.submission),
            "submit_date": self.submit_date,
            "exercise_id": self.exercise_id,
            "confidence": self.confidence,
            "type": self.type,
            "seq": self.seq,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Submission":
        return Submission(
            question_uid=data["question_uid"],
            answeree=data["answeree"],
            session=data["session"],
            submission=tuple(data.get("submission") or ()),
            submit_date=int(data["submit_date"]),
            exercise_id=data.get("exercise_id"),
            confidence=data.get("confidence"),
            type=data.get("type"),
            seq=data.get("seq"),
        )


class SubmissionRequest(BaseModel):
    """Inbound answer as sent by a viewer client."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    question_uid: str = Field(alias="questionUid")
    exercise_id: Optional[str] = Field(default=None, alias="exerciseId")
    answeree: str
    session: str
    submission: List[str]
    confidence: Optional[int] = None


@dataclass(frozen=True)
class PresenterEntry:
    """One participant's latest submission for a question."""
    participant_id: str
    submission: Tuple[str, ...]
    submit_date: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "participantId": self.participant_id,
            "submission": list(self.submission),
            "submitDate": self.submit_date,
        }


@dataclass(frozen=True)
class ViewerEntry:
    """A participant's latest order for one question."""
    question_uid: str
    orders: Tuple[str, ...]

    def to_payload(self) -> Dict[str, Any]:
        return {"uid": self.question_uid, "orders": list(self.orders)}
