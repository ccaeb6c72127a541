"""
Tests for sustain_advisor/assessment/service.py.

What we test
------------
AssessmentService.start():
  - New session reported as opening / 0 / not complete, with the opening
    question in the requested language.
  - Unsupported language codes fall back to English.

AssessmentService.submit_turn():
  - Merges the score update, counts the turn and moves to the proposed stage.
  - Unrecognized next_stage keeps the current stage, still counts the turn,
    and reports progress 0.
  - Reaching "complete" stamps completed_at; later turns raise
    SessionCompleteError.
  - Unknown session ids raise SessionNotFoundError.
  - The user message and the assistant reply are appended to the
    conversation history; the reply comes back in the TurnResult.

AssessmentService.get_result():
  - Computed on first read, cached, and never recomputed.

TurnUpdate:
  - Extra keys of the decoded turn response are ignored.
  - A null scores_update or next_question is treated as empty.
"""

from __future__ import annotations

import pytest

from sustain_advisor.assessment.service import (
    AssessmentService,
    SessionCompleteError,
    TurnUpdate,
    opening_question,
)
from sustain_advisor.assessment.store import SessionNotFoundError
from sustain_advisor.config import AppConfig
from sustain_advisor.taxonomy.assessment_taxonomy import AssessmentStage, ChatRole, Language


def _turn(next_stage: str, **scores_update) -> TurnUpdate:
    return TurnUpdate.model_validate(
        {"scores_update": scores_update, "next_stage": next_stage}
    )


class TestStart:
    def test_initial_status(self, service):
        started = service.start("en")
        assert started.status.stage == "opening"
        assert started.status.progress == 0
        assert started.status.is_complete is False
        assert started.question == opening_question(Language.EN)
        assert started.session_id in service.store

    def test_chinese_question(self, service):
        started = service.start("zh")
        assert started.question == opening_question(Language.ZH)
        assert service.store.get(started.session_id).language == Language.ZH

    def test_unknown_language_falls_back_to_english(self, service):
        started = service.start("fr")
        assert service.store.get(started.session_id).language == Language.EN

    def test_default_language(self, service):
        started = service.start()
        assert service.store.get(started.session_id).language == service.default_language


class TestSubmitTurn:
    def test_merges_and_advances(self, service):
        sid = service.start().session_id
        turn = _turn("risk", risk={"raw": 72, "confidence": 0.4})
        status = service.submit_turn(sid, turn).status

        assert status.stage == "risk"
        assert status.progress == 30
        session = service.store.get(sid)
        assert session.stage == AssessmentStage.RISK
        assert session.conversation_count == 1
        assert session.scores.risk.raw == 72.0
        assert session.scores.time_horizon.raw == 50.0

    def test_unknown_stage_keeps_current(self, service):
        sid = service.start().session_id
        service.submit_turn(sid, _turn("goals"))
        status = service.submit_turn(sid, _turn("foo", goalType="income")).status

        assert status.stage == "foo"
        assert status.progress == 0
        assert status.is_complete is False
        session = service.store.get(sid)
        assert session.stage == AssessmentStage.GOALS
        assert session.conversation_count == 2
        assert session.scores.goal_type == "income"

    def test_complete_stamps_and_locks(self, service):
        sid = service.start().session_id
        status = service.submit_turn(sid, _turn("complete")).status
        assert status.is_complete is True
        assert status.progress == 100

        session = service.store.get(sid)
        assert session.is_complete
        assert session.completed_at is not None

        with pytest.raises(SessionCompleteError):
            service.submit_turn(sid, _turn("values"))
        assert service.store.get(sid).conversation_count == 1

    def test_unknown_session(self, service):
        with pytest.raises(SessionNotFoundError):
            service.submit_turn("missing", _turn("risk"))

    def test_biases_replaced_across_turns(self, service):
        sid = service.start().session_id
        service.submit_turn(
            sid,
            _turn("behavior", biases=[{"type": "herding", "strength": "high", "evidence": "a"}]),
        )
        service.submit_turn(
            sid,
            _turn("values", biases=[{"type": "anchoring", "strength": "low", "evidence": "b"}]),
        )
        biases = service.store.get(sid).scores.biases
        assert [b.type for b in biases] == ["anchoring"]


class TestConversationHistory:
    def test_user_and_assistant_entries_appended(self, service):
        sid = service.start().session_id
        turn = TurnUpdate.model_validate(
            {
                "scores_update": {"risk": {"raw": 40, "confidence": 0.5}},
                "next_stage": "risk",
                "next_question": "How would you react to a 20% drop?",
            }
        )
        outcome = service.submit_turn(sid, turn, user_message="I have invested in index funds.")

        assert outcome.reply == "How would you react to a 20% drop?"
        assert outcome.status.stage == "risk"
        history = service.store.get(sid).conversation_history
        assert [(m.role, m.content) for m in history] == [
            (ChatRole.USER, "I have invested in index funds."),
            (ChatRole.ASSISTANT, "How would you react to a 20% drop?"),
        ]

    def test_opening_question_not_recorded(self, service):
        sid = service.start().session_id
        assert service.store.get(sid).conversation_history == []

    def test_history_grows_in_order(self, service):
        sid = service.start().session_id
        for i in range(3):
            turn = TurnUpdate.model_validate(
                {"next_stage": "risk", "next_question": f"Q{i}"}
            )
            service.submit_turn(sid, turn, user_message=f"A{i}")

        history = service.store.get(sid).conversation_history
        assert [m.content for m in history] == ["A0", "Q0", "A1", "Q1", "A2", "Q2"]
        assert [m.role for m in history[:2]] == ["user", "assistant"]

    def test_no_message_no_question(self, service):
        sid = service.start().session_id
        outcome = service.submit_turn(sid, _turn("risk"))
        assert outcome.reply == ""
        assert service.store.get(sid).conversation_history == []

    def test_rejected_turn_leaves_history_untouched(self, service):
        sid = service.start().session_id
        service.submit_turn(sid, _turn("complete"), user_message="Done.")
        with pytest.raises(SessionCompleteError):
            service.submit_turn(sid, _turn("values"), user_message="One more thing.")
        history = service.store.get(sid).conversation_history
        assert [m.content for m in history] == ["Done."]


class TestGetResult:
    def test_full_conversation(self, service):
        sid = service.start().session_id
        service.submit_turn(sid, _turn("risk", risk={"raw": 65, "confidence": 0.8}))
        service.submit_turn(sid, _turn("goals", timeHorizon={"raw": 75, "confidence": 0.6}))
        service.submit_turn(
            sid,
            _turn(
                "confirmation",
                esg={"environmental": 90, "social": 60, "governance": 40},
                sdgPriorities=[7, 13],
            ),
        )
        service.submit_turn(sid, _turn("complete"))

        result = service.get_result(sid)
        assert [t.track_id for t in result.recommended_tracks] == [
            "clean_energy", "social_housing", "governance_leaders",
        ]
        assert result.recommended_tracks[0].match_score == 84
        assert result.investor_profile.investor_type == "balanced investor"

    def test_result_cached_and_not_recomputed(self, service):
        sid = service.start().session_id
        first = service.get_result(sid)

        # A later turn changes the scores, but the cached result stays.
        service.submit_turn(sid, _turn("risk", risk={"raw": 5, "confidence": 1.0}))
        second = service.get_result(sid)

        assert second is first
        assert second.scores.risk.raw == 50.0

    def test_result_for_unknown_session(self, service):
        with pytest.raises(SessionNotFoundError):
            service.get_result("missing")

    def test_top_n_respected(self, sample_catalog):
        from sustain_advisor.assessment.store import SessionStore

        svc = AssessmentService(store=SessionStore(), catalog=sample_catalog, top_n=1)
        sid = svc.start().session_id
        assert len(svc.get_result(sid).recommended_tracks) == 1


class TestFromConfig:
    def test_uses_config_values(self, sample_catalog):
        config = AppConfig.model_validate(
            {
                "matcher": {"top_n": 2},
                "session": {"ttl_seconds": 120, "max_sessions": 5, "default_language": "zh"},
            }
        )
        svc = AssessmentService.from_config(config, catalog=sample_catalog)
        assert svc.top_n == 2
        assert svc.store.ttl_seconds == 120
        assert svc.store.max_sessions == 5
        assert svc.default_language == Language.ZH

    def test_loads_shipped_catalog(self):
        svc = AssessmentService.from_config(AppConfig())
        assert len(svc.catalog) == 10


class TestTurnUpdate:
    def test_extra_keys_ignored(self):
        turn = TurnUpdate.model_validate(
            {
                "analysis": "User is cautious.",
                "scores_update": {"risk": {"raw": 30, "confidence": 0.5}},
                "next_stage": "goals",
                "next_question": "How long can you stay invested?",
                "reasoning": "Risk covered.",
            }
        )
        assert turn.next_stage == "goals"
        assert turn.scores_update.risk.raw == 30.0

    def test_missing_scores_update(self):
        turn = TurnUpdate.model_validate({"next_stage": "risk"})
        assert turn.scores_update.risk is None

    def test_null_scores_update_is_empty(self):
        turn = TurnUpdate.model_validate({"scores_update": None, "next_stage": "goals"})
        assert turn.scores_update.risk is None
        assert turn.scores_update.biases is None

    def test_null_next_question_is_empty(self):
        turn = TurnUpdate.model_validate({"next_stage": "goals", "next_question": None})
        assert turn.next_question == ""

    def test_malformed_list_fields_do_not_reject_the_turn(self):
        turn = TurnUpdate.model_validate(
            {"scores_update": {"biases": 5, "sdgPriorities": "13"}, "next_stage": "values"}
        )
        assert turn.scores_update.biases is None
        assert turn.scores_update.sdg_priorities is None
