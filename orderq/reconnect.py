"""
Reconnect coordinator: one-shot reconstruction of presenter and viewer views.

A client that (re)connects receives the same picture it would hold had it
observed every progress push, collapsed to latest-per-participant. Each
question entry of restorePresenter equals the submissions list of the
progress event the live notifier would emit for that question now.
"""

from typing import Any, Dict, List, Optional

from . import QUESTION_TYPE
from .logging_config import get_logger
from .log.store import SubmissionLog
from .metrics import track_reconstruction_duration
from .notify import Channel
from .questions import QuestionRepository
from .views import build_presenter_view, build_viewer_view, presenter_payload, viewer_payload

RESTORE_PRESENTER_EVENT = "restorePresenter"
RESTORE_VIEWER_EVENT = "restoreViewer"


class ReconnectCoordinator:
    """
    Rebuilds views from the full log for newly connected clients.

    Shares nothing with the live notifier except the log, so both may run
    concurrently.
    """

    def __init__(
        self,
        questions: QuestionRepository,
        log: SubmissionLog,
        channel: Channel,
        type_tag: str = QUESTION_TYPE,
    ) -> None:
        self.questions = questions
        self.log = log
        self.channel = channel
        self.type_tag = type_tag

    def _question_uids(self, presentation_id: str) -> List[str]:
        questions = self.questions.get_questions_by_type_for_presentation(presentation_id, self.type_tag)
        return [q.uid for q in questions]

    def restore_presenter(self, session_id: str, presentation_id: str) -> Dict[str, Any]:
        """
        Presenter bundle: every question of this type, each with its triples.

        Questions without submissions map to an empty list.
        """
        with track_reconstruction_duration("presenter"):
            questions = [
                {
                    "uid": uid,
                    "submissions": presenter_payload(build_presenter_view(self.log, session_id, uid)),
                }
                for uid in self._question_uids(presentation_id)
            ]
        return {"questionType": self.type_tag, "questions": questions}

    def restore_viewer(self, session_id: str, presentation_id: str, participant_id: Optional[str]) -> Dict[str, Any]:
        """
        Viewer bundle: one entry per question the participant has answered.

        participant_id is the viewer's own identity; the caller enforces that.
        A missing participant gets an empty bundle.
        """
        with track_reconstruction_duration("viewer"):
            uids = self._question_uids(presentation_id)
            entries = build_viewer_view(self.log, session_id, participant_id, uids)
        return {"questionType": self.type_tag, "questions": viewer_payload(entries)}

    def _emit(self, logger, socket_id: str, event_name: str, payload: Dict[str, Any]) -> bool:
        try:
            self.channel.emit_to_socket(socket_id, event_name, payload)
        except Exception as e:
            logger.warning(f"Failed to emit {event_name} to {socket_id}: {e}")
            return False
        return True

    def presenter_reconnect(self, session_id: str, presentation_id: str, socket_id: str) -> Dict[str, Any]:
        """
        Send the presenter bundle to one socket.

        A failed emit is logged and not retried; the payload is returned either way.
        """
        logger = get_logger(__name__, trace_id=session_id)
        payload = self.restore_presenter(session_id, presentation_id)
        if not self._emit(logger, socket_id, RESTORE_PRESENTER_EVENT, payload):
            return payload
        logger.info(
            f"Restored presenter {socket_id} with {len(payload['questions'])} questions"
        )
        return payload

    def viewer_reconnect(
        self, session_id: str, presentation_id: str, participant_id: str, socket_id: str
    ) -> Dict[str, Any]:
        logger = get_logger(__name__, trace_id=session_id)
        payload = self.restore_viewer(session_id, presentation_id, participant_id)
        if not self._emit(logger, socket_id, RESTORE_VIEWER_EVENT, payload):
            return payload
        logger.info(
            f"Restored viewer {participant_id} with {len(payload['questions'])} answered questions"
        )
        return payload
