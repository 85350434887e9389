"""
Tests for the ordering plugin: ingest, live progress pushes and reconnects.
"""

import pytest

from orderq.core.canonical import canonical_json_str
from orderq.core.clock import FixedClock
from orderq.core.errors import MalformedSubmissionError, SchemaError
from orderq.core.models import Question
from orderq.hooks import (
    ON_CONNECT_PRESENTER,
    ON_CONNECT_VIEWER,
    ON_DEFINE,
    ON_INGEST,
    HookRegistry,
)
from orderq.log import InMemorySubmissionLog, SubmissionFilter
from orderq.notify import PRESENTER_ROLE, PROGRESS_EVENT, Channel, RecordingChannel
from orderq.plugin import OrderQuestionPlugin, build_plugin
from orderq.questions import InMemoryQuestionRepository
from orderq.reconnect import RESTORE_PRESENTER_EVENT, RESTORE_VIEWER_EVENT, ReconnectCoordinator


class Harness:
    def __init__(self):
        self.questions = InMemoryQuestionRepository([
            Question(uid="Q1", type="asq-order-q", items=("A", "B", "C"), presentation_id="pres"),
            Question(uid="Q2", type="asq-order-q", items=("X", "Y", "Z"), presentation_id="pres"),
            Question(uid="MC", type="asq-multi-choice-q", items=("yes", "no"), presentation_id="pres"),
        ])
        self.log = InMemorySubmissionLog(self.questions)
        self.channel = RecordingChannel()
        self.clock = FixedClock(current=1000)
        self.hooks = build_plugin(self.questions, self.log, self.channel, self.clock)

    def submit(self, answeree, question, order, session="S", tick=1):
        self.clock.tick(tick)
        answer = {
            "questionUid": question,
            "exerciseId": "ex1",
            "answeree": answeree,
            "session": session,
            "submission": list(order),
        }
        return self.hooks.run(ON_INGEST, answer)


@pytest.fixture
def h():
    return Harness()


def test_accepted_submission_is_logged_and_returned_unchanged(h):
    answer = {
        "questionUid": "Q1",
        "exerciseId": "ex1",
        "answeree": "P1",
        "session": "S",
        "submission": ["C", "A", "B"],
        "confidence": 3,
    }
    out = h.hooks.run(ON_INGEST, answer)

    assert out is answer
    [stored] = h.log.query(SubmissionFilter(session="S"))
    assert stored.submission == ("C", "A", "B")
    assert stored.exercise_id == "ex1"
    assert stored.confidence == 3
    assert stored.type == "asq-order-q"
    assert stored.submit_date == 1000


def test_progress_push_carries_full_aggregate(h):
    h.submit("P1", "Q1", "ABC")
    h.submit("P2", "Q1", "BCA")
    h.submit("P1", "Q1", "CBA")

    pushes = h.channel.named(PROGRESS_EVENT)
    assert len(pushes) == 3
    last = pushes[-1]
    assert last.session_id == "S"
    assert last.role == PRESENTER_ROLE
    assert last.payload["questionUid"] == "Q1"
    assert last.payload["questionType"] == "asq-order-q"
    assert last.payload["submissions"] == [
        {"participantId": "P1", "submission": ["C", "B", "A"], "submitDate": 1003},
        {"participantId": "P2", "submission": ["B", "C", "A"], "submitDate": 1002},
    ]


def test_other_question_type_passes_through(h):
    answer = {"questionUid": "MC", "answeree": "P1", "session": "S", "submission": "yes"}
    assert h.hooks.run(ON_INGEST, answer) is answer
    assert h.log.query(SubmissionFilter()) == []
    assert h.channel.emissions == []


def test_unknown_question_is_surfaced(h):
    with pytest.raises(SchemaError):
        h.submit("P1", "nope", "ABC")
    with pytest.raises(SchemaError):
        h.hooks.run(ON_INGEST, {"answeree": "P1", "session": "S", "submission": []})
    assert h.channel.emissions == []


@pytest.mark.parametrize("submission", ["ABC", None, ["A", "B"], ["A", "B", "B"]])
def test_malformed_submission_is_surfaced_and_not_logged(h, submission):
    h.submit("P1", "Q1", "ABC")
    before = h.log.query(SubmissionFilter(session="S"))

    answer = {"questionUid": "Q1", "answeree": "P1", "session": "S", "submission": submission}
    with pytest.raises(MalformedSubmissionError):
        h.hooks.run(ON_INGEST, answer)

    assert h.log.query(SubmissionFilter(session="S")) == before
    assert len(h.channel.named(PROGRESS_EVENT)) == 1


def test_same_millisecond_resubmission_uses_arrival_order(h):
    h.submit("P1", "Q1", "ABC")
    h.submit("P1", "Q1", "BAC", tick=0)

    payload = h.channel.named(PROGRESS_EVENT)[-1].payload
    assert payload["submissions"] == [{"participantId": "P1", "submission": ["B", "A", "C"], "submitDate": 1001}]


def test_presenter_reconnect_with_no_submissions(h):
    info = {"session_id": "S", "presentation_id": "pres", "socket_id": "sock-1"}
    assert h.hooks.run(ON_CONNECT_PRESENTER, info) is info

    [emission] = h.channel.named(RESTORE_PRESENTER_EVENT)
    assert emission.socket_id == "sock-1"
    assert emission.payload["questions"] == [
        {"uid": "Q1", "submissions": []},
        {"uid": "Q2", "submissions": []},
    ]


def test_presenter_reconnect_equals_latest_progress_per_question(h):
    h.submit("P1", "Q1", "ABC")
    h.submit("P2", "Q2", "ZYX")
    h.submit("P2", "Q1", "CAB")
    h.submit("P1", "Q1", "BCA")
    h.submit("P3", "Q2", "XZY")

    # What a presenter connected throughout holds: last push per question
    live = {}
    for emission in h.channel.named(PROGRESS_EVENT):
        live[emission.payload["questionUid"]] = emission.payload["submissions"]

    h.hooks.run(ON_CONNECT_PRESENTER, {"session_id": "S", "presentation_id": "pres", "socket_id": "late"})
    restored = h.channel.named(RESTORE_PRESENTER_EVENT)[-1].payload

    assert {q["uid"]: canonical_json_str(q["submissions"]) for q in restored["questions"]} == {
        uid: canonical_json_str(subs) for uid, subs in live.items()
    }


def test_viewer_reconnect_restores_only_own_answers(h):
    h.submit("P1", "Q1", "ABC")
    h.submit("P1", "Q2", "XYZ")
    h.submit("P2", "Q1", "CBA")
    h.submit("P2", "Q1", "BAC")

    info = {"session_id": "S", "presentation_id": "pres", "whitelist_id": "P2", "socket_id": "v2"}
    h.hooks.run(ON_CONNECT_VIEWER, info)

    [emission] = h.channel.named(RESTORE_VIEWER_EVENT)
    assert emission.socket_id == "v2"
    assert emission.payload["questions"] == [{"uid": "Q1", "orders": ["B", "A", "C"]}]


def test_connect_without_session_is_a_no_op(h):
    info = {"presentation_id": "pres", "socket_id": "sock"}
    assert h.hooks.run(ON_CONNECT_PRESENTER, info) is info
    assert h.hooks.run(ON_CONNECT_VIEWER, info) is info
    assert h.channel.emissions == []


def test_sessions_are_isolated(h):
    h.submit("P1", "Q1", "ABC", session="S")
    h.submit("P1", "Q1", "CBA", session="T")

    h.hooks.run(ON_CONNECT_PRESENTER, {"session_id": "S", "presentation_id": "pres", "socket_id": "x"})
    payload = h.channel.named(RESTORE_PRESENTER_EVENT)[-1].payload
    assert payload["questions"][0]["submissions"][0]["submission"] == ["A", "B", "C"]


def test_define_questions_assigns_missing_uids():
    questions = InMemoryQuestionRepository()
    hooks = HookRegistry()
    OrderQuestionPlugin(questions, InMemorySubmissionLog(questions), RecordingChannel()).register(hooks)

    definitions = [
        {"type": "asq-order-q", "presentation_id": "pres", "items": ["ready", "attached"]},
        {"uid": "fixed", "type": "asq-order-q", "presentation_id": "pres", "items": ["a", "b"]},
        {"uid": "mc1", "type": "asq-multi-choice-q", "presentation_id": "pres"},
    ]
    out = hooks.run(ON_DEFINE, definitions)

    assert len(out) == 3
    generated = out[0]["uid"]
    assert len(generated) == 24
    assert out[1]["uid"] == "fixed"
    assert out[2] is definitions[2]
    assert questions.get_question_by_id(generated).items == ("ready", "attached")
    assert questions.get_question_by_id("mc1") is None
    assert [q.uid for q in questions.get_questions_by_type_for_presentation("pres", "asq-order-q")] == [
        generated,
        "fixed",
    ]


def test_failed_push_does_not_reject_submission():
    class BrokenChannel(RecordingChannel):
        def emit_to_role(self, session_id, role, event_name, payload):
            raise ConnectionError("socket gone")

    questions = InMemoryQuestionRepository([
        Question(uid="Q1", type="asq-order-q", items=("A", "B"), presentation_id="pres"),
    ])
    log = InMemorySubmissionLog(questions)
    hooks = build_plugin(questions, log, BrokenChannel(), FixedClock(current=5))

    hooks.run(ON_INGEST, {"questionUid": "Q1", "answeree": "P1", "session": "S", "submission": ["B", "A"]})

    assert len(log) == 1


def test_viewer_connect_without_whitelist_id_restores_nothing(h):
    h.submit("P1", "Q1", "ABC")
    h.submit("P2", "Q2", "ZYX")

    info = {"session_id": "S", "presentation_id": "pres", "socket_id": "anon"}
    assert h.hooks.run(ON_CONNECT_VIEWER, info) is info

    assert h.channel.named(RESTORE_VIEWER_EVENT) == []
    restored = ReconnectCoordinator(h.questions, h.log, h.channel).restore_viewer("S", "pres", None)
    assert restored["questions"] == []


@pytest.mark.parametrize("info", [
    {"session_id": "S", "presentation_id": "pres", "socket_id": "ctrl-1"},
    {"sessionId": "S", "presentationId": "pres", "socketId": "ctrl-1"},
])
def test_presenter_connect_accepts_both_key_styles(h, info):
    h.submit("P1", "Q1", "BCA")

    h.hooks.run(ON_CONNECT_PRESENTER, info)

    [emission] = h.channel.named(RESTORE_PRESENTER_EVENT)
    assert emission.socket_id == "ctrl-1"
    assert emission.payload["questions"][0]["submissions"][0]["participantId"] == "P1"


@pytest.mark.parametrize("info", [
    {"session_id": "S", "presentation_id": "pres", "whitelist_id": "P1", "socket_id": "v1"},
    {"sessionId": "S", "presentationId": "pres", "whitelistId": "P1", "socketId": "v1"},
])
def test_viewer_connect_accepts_both_key_styles(h, info):
    h.submit("P1", "Q1", "BCA")
    h.submit("P2", "Q1", "CAB")

    h.hooks.run(ON_CONNECT_VIEWER, info)

    [emission] = h.channel.named(RESTORE_VIEWER_EVENT)
    assert emission.socket_id == "v1"
    assert emission.payload["questions"] == [{"uid": "Q1", "orders": ["B", "C", "A"]}]


def test_failed_restore_emit_is_not_raised():
    class BrokenChannel(RecordingChannel):
        def emit_to_socket(self, socket_id, event_name, payload):
            raise ConnectionError("socket gone")

    questions = InMemoryQuestionRepository([
        Question(uid="Q1", type="asq-order-q", items=("A", "B"), presentation_id="pres"),
    ])
    log = InMemorySubmissionLog(questions)
    plugin = OrderQuestionPlugin(questions, log, BrokenChannel(), FixedClock(current=5))
    hooks = HookRegistry()
    plugin.register(hooks)
    hooks.run(ON_INGEST, {"questionUid": "Q1", "answeree": "P1", "session": "S", "submission": ["B", "A"]})

    presenter_info = {"session_id": "S", "presentation_id": "pres", "socket_id": "ctrl"}
    viewer_info = {"session_id": "S", "presentation_id": "pres", "whitelist_id": "P1", "socket_id": "v1"}
    assert hooks.run(ON_CONNECT_PRESENTER, presenter_info) is presenter_info
    assert hooks.run(ON_CONNECT_VIEWER, viewer_info) is viewer_info

    payload = plugin.coordinator.presenter_reconnect("S", "pres", "ctrl")
    assert payload["questions"][0]["submissions"][0]["submission"] == ["B", "A"]
    payload = plugin.coordinator.viewer_reconnect("S", "pres", "P1", "v1")
    assert payload["questions"] == [{"uid": "Q1", "orders": ["B", "A"]}]


def test_channel_requires_both_emit_methods():
    class RoleOnlyChannel(Channel):
        def emit_to_role(self, session_id, role, event_name, payload):
            return None

    with pytest.raises(TypeError):
        Channel()
    with pytest.raises(TypeError):
        RoleOnlyChannel()
