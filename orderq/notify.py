"""
Outbound notification channel and the live progress notifier.

The channel is fire-and-forget: no acknowledgement, no retry. A lost push is
recovered by the next reconnect, not here.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from . import QUESTION_TYPE
from .logging_config import get_logger
from .log.store import SubmissionLog
from .metrics import track_progress_event
from .views import build_presenter_view, presenter_payload

PRESENTER_ROLE = "ctrl"
PROGRESS_EVENT = "progress"


class Channel(ABC):
    """
    Transport seam. Implementations push events to connected clients.
    """

    @abstractmethod
    def emit_to_role(self, session_id: str, role: str, event_name: str, payload: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def emit_to_socket(self, socket_id: str, event_name: str, payload: Dict[str, Any]) -> None:
        ...


class NullChannel(Channel):
    """Drops every event."""

    def emit_to_role(self, session_id, role, event_name, payload) -> None:
        return None

    def emit_to_socket(self, socket_id, event_name, payload) -> None:
        return None


@dataclass(frozen=True)
class Emission:
    """
    One recorded emit.

    Exactly one of (session_id, role) or socket_id is set.
    """
    event_name: str
    payload: Dict[str, Any]
    session_id: Optional[str] = None
    role: Optional[str] = None
    socket_id: Optional[str] = None


class RecordingChannel(Channel):
    """Keeps every emitted event in memory, in emit order."""

    def __init__(self) -> None:
        self.emissions: List[Emission] = []
        self._lock = threading.Lock()

    def emit_to_role(self, session_id, role, event_name, payload) -> None:
        with self._lock:
            self.emissions.append(Emission(event_name, payload, session_id=session_id, role=role))

    def emit_to_socket(self, socket_id, event_name, payload) -> None:
        with self._lock:
            self.emissions.append(Emission(event_name, payload, socket_id=socket_id))

    def named(self, event_name: str) -> List[Emission]:
        return [e for e in self.emissions if e.event_name == event_name]


class LiveNotifier:
    """
    Pushes the full presenter aggregate of a question after each accepted append.

    Consumers replace their prior view of the question with each push; pushes
    from concurrent submitters may arrive in any order.
    """

    def __init__(self, log: SubmissionLog, channel: Channel, type_tag: str = QUESTION_TYPE) -> None:
        self.log = log
        self.channel = channel
        self.type_tag = type_tag

    def progress_payload(self, session_id: str, question_uid: str) -> Dict[str, Any]:
        entries = build_presenter_view(self.log, session_id, question_uid)
        return {
            "questionType": self.type_tag,
            "questionUid": question_uid,
            "submissions": presenter_payload(entries),
        }

    def notify(self, session_id: str, question_uid: str) -> Dict[str, Any]:
        """
        Build and emit a progress event to the session's presenter role.

        Returns:
            The emitted payload (also returned when delivery failed)
        """
        logger = get_logger(__name__, trace_id=session_id)
        payload = self.progress_payload(session_id, question_uid)
        try:
            self.channel.emit_to_role(session_id, PRESENTER_ROLE, PROGRESS_EVENT, payload)
        except Exception as e:
            logger.warning(f"Progress push for question {question_uid} failed: {e}")
            return payload

        track_progress_event()
        logger.debug(
            f"Progress pushed for question {question_uid} "
            f"({len(payload['submissions'])} participants)"
        )
        return payload
