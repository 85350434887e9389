"""
Ordering question plugin.

Wires the submission log, live notifier and reconnect coordinator into the
host's hook pipeline. All collaborators are passed in; nothing is looked up
from ambient state.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from . import QUESTION_TYPE
from .core.clock import SystemClock
from .core.errors import (
    MalformedSubmissionError,
    SchemaError,
    SubmissionValidationError,
    TypeMismatchError,
)
from .core.ids import new_uid
from .core.models import Question, Submission, SubmissionRequest
from .hooks import (
    ON_CONNECT_PRESENTER,
    ON_CONNECT_VIEWER,
    ON_DEFINE,
    ON_INGEST,
    HookRegistry,
)
from .log.store import AppendResult, SubmissionLog
from .logging_config import get_logger
from .metrics import track_submission
from .notify import Channel, LiveNotifier
from .questions import QuestionRepository
from .reconnect import ReconnectCoordinator

_OUTCOMES = {
    SchemaError: "schema",
    TypeMismatchError: "type_mismatch",
    MalformedSubmissionError: "malformed",
}


def _outcome(err: SubmissionValidationError) -> str:
    return _OUTCOMES.get(type(err), "malformed")


def _info_value(info: Mapping[str, Any], key: str, camel_key: str) -> Any:
    """Connect info arrives with snake_case or the host's camelCase keys."""
    value = info.get(key)
    return value if value is not None else info.get(camel_key)


class OrderQuestionPlugin:
    """
    Handlers for the ordering question type.

    Usage:
        plugin = OrderQuestionPlugin(questions, log, channel)
        plugin.register(hooks)
        hooks.run(ON_INGEST, {"questionUid": "q1", ...})
    """

    def __init__(
        self,
        questions: QuestionRepository,
        log: SubmissionLog,
        channel: Channel,
        clock=None,
        type_tag: str = QUESTION_TYPE,
    ) -> None:
        self.questions = questions
        self.log = log
        self.channel = channel
        self.clock = clock or SystemClock()
        self.type_tag = type_tag
        self.notifier = LiveNotifier(log, channel, type_tag)
        self.coordinator = ReconnectCoordinator(questions, log, channel, type_tag)

    def register(self, hooks: HookRegistry) -> None:
        hooks.register(ON_DEFINE, self.define_questions)
        hooks.register(ON_INGEST, self.answer_submission)
        hooks.register(ON_CONNECT_PRESENTER, self.presenter_connected)
        hooks.register(ON_CONNECT_VIEWER, self.viewer_connected)

    def define_questions(self, definitions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Store definitions of this question type; others pass through.

        A definition without uid gets a fresh one. Returns the definitions
        with uids filled in.
        """
        out = []
        for definition in definitions:
            if definition.get("type") != self.type_tag:
                out.append(definition)
                continue
            uid = str(definition.get("uid") or "").strip()
            if not uid:
                definition = dict(definition, uid=new_uid())
            question = Question.from_dict(definition)
            self.questions.add(question)
            out.append(definition)
        return out

    def _resolve(self, answer: Mapping[str, Any]) -> Question:
        question_uid = answer.get("questionUid", answer.get("question_uid"))
        question = self.questions.get_question_by_id(question_uid) if question_uid else None
        if question is None:
            raise SchemaError(f"Could not find question with id {question_uid}")
        if question.type != self.type_tag:
            raise TypeMismatchError(f"Question {question.uid} is of type {question.type}")
        return question

    def ingest(self, answer: Mapping[str, Any]) -> AppendResult:
        """
        Validate, stamp, append and push progress for one answer.

        Raises:
            SchemaError: Unknown question
            TypeMismatchError: Question of another type
            MalformedSubmissionError: Bad shape or not a permutation
        """
        question = self._resolve(answer)
        try:
            request = SubmissionRequest.model_validate(dict(answer))
        except ValidationError as e:
            raise MalformedSubmissionError(
                f"Invalid answer format for question {question.uid}: {e.error_count()} errors"
            ) from e

        record = Submission(
            question_uid=request.question_uid,
            answeree=request.answeree,
            session=request.session,
            submission=tuple(request.submission),
            submit_date=self.clock.now_ms(),
            exercise_id=request.exercise_id,
            confidence=request.confidence,
            type=question.type,
        )
        result = self.log.append(record)
        self.notifier.notify(record.session, record.question_uid)
        return result

    def answer_submission(self, answer: Mapping[str, Any]) -> Mapping[str, Any]:
        """
        on_ingest handler. Returns the answer unchanged for the next handler.

        Answers for other question types pass through untouched.
        """
        logger = get_logger(__name__, trace_id=answer.get("session"))
        try:
            result = self.ingest(answer)
        except TypeMismatchError:
            track_submission("type_mismatch")
            return answer
        except SubmissionValidationError as e:
            track_submission(_outcome(e))
            logger.warning(f"Rejected submission from {answer.get('answeree')}: {e}")
            raise

        track_submission("accepted")
        logger.info(
            f"Accepted submission seq={result.seq} from {result.submission.answeree} "
            f"for question {result.submission.question_uid}"
        )
        return answer

    def presenter_connected(self, info: Dict[str, Any]) -> Dict[str, Any]:
        """on_connect_presenter handler; no-op without a session."""
        session_id = _info_value(info, "session_id", "sessionId")
        if not session_id:
            return info
        self.coordinator.presenter_reconnect(
            session_id,
            _info_value(info, "presentation_id", "presentationId"),
            _info_value(info, "socket_id", "socketId"),
        )
        return info

    def viewer_connected(self, info: Dict[str, Any]) -> Dict[str, Any]:
        """
        on_connect_viewer handler; restores only the viewer's own answers.

        No-op without a session or without the viewer's whitelisted identity.
        """
        session_id = _info_value(info, "session_id", "sessionId")
        whitelist_id = _info_value(info, "whitelist_id", "whitelistId")
        if not session_id or not whitelist_id:
            return info
        self.coordinator.viewer_reconnect(
            session_id,
            _info_value(info, "presentation_id", "presentationId"),
            whitelist_id,
            _info_value(info, "socket_id", "socketId"),
        )
        return info


def build_plugin(
    questions: QuestionRepository,
    log: SubmissionLog,
    channel: Channel,
    clock=None,
    hooks: Optional[HookRegistry] = None,
) -> HookRegistry:
    """Create a plugin, register it and return the hook registry."""
    hooks = hooks or HookRegistry()
    OrderQuestionPlugin(questions, log, channel, clock).register(hooks)
    return hooks
