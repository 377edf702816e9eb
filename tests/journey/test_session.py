# tests/journey/test_session.py
import pytest

from services.journey_engine.loader import load_question_catalog_data
from services.journey_engine.models import (
    ConversionType,
    InvalidResponseError,
    Layer,
    PersuasionBand,
    PoliticalLens,
    ResultCategory,
)
from services.journey_engine.session import JourneySession

CATALOG = load_question_catalog_data({
    "version": "test",
    "questions": [
        {"id": "va-fairness", "layer": "value-alignment", "persuasion_weight": 0.8},
        {"id": "de-tax", "layer": "data-exposure", "persuasion_weight": 0.9, "data_point_id": "dp-tax"},
    ],
})

# --- Helper Function ---
def answer_values_layer(session):
    session.record_response("va-fairness", "yes", 10, 0.8)
    session.record_response("va-work", "yes", 40, 0.6)
    session.record_response("va-law", "no", 20, 0.5)

# --- Test Cases ---

def test_new_session_initial_state(session):
    assert session.session_id == "test-session"
    assert session.political_lens is None
    assert session.current_layer == Layer.VALUE_ALIGNMENT
    assert session.completed_layers == []
    assert session.responses == []
    assert session.scores.rounded() == {
        "value_alignment": 0,
        "data_awareness": 0,
        "persuasion_level": 0,
        "engagement_depth": 0,
    }

def test_generated_session_ids_are_unique():
    assert JourneySession().session_id != JourneySession().session_id

def test_set_lens_starts_clock_once(session):
    session.set_lens("far-right")
    started_at = session.started_at
    session.set_lens(PoliticalLens.MID_RIGHT)

    assert session.political_lens == PoliticalLens.MID_RIGHT
    assert started_at is not None
    assert session.started_at == started_at
    assert session.progression.layer_started_at[Layer.VALUE_ALIGNMENT] == started_at

def test_set_unknown_lens_rejected(session):
    with pytest.raises(InvalidResponseError) as exc_info:
        session.set_lens("centrist")
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert session.political_lens is None

def test_values_layer_journey(session):
    session.set_lens(PoliticalLens.FAR_RIGHT)
    answer_values_layer(session)

    assert all(r.layer == Layer.VALUE_ALIGNMENT for r in session.responses)
    assert session.scores.rounded() == {
        "value_alignment": 67,
        "data_awareness": 0,
        "persuasion_level": 74,
        "engagement_depth": 78,
    }
    assert session.coarse_score() == 4
    assert session.result_category() == ResultCategory.DEMOGRAPHIC
    assert session.result_page()["ctas"] == ["contact-reps", "petition"]
    assert session.conviction_level() == PersuasionBand.ENGAGED
    assert [a.action_id for a in session.prioritized_actions()] == [
        "contact-reps", "petition", "spread-word", "donation",
    ]
    assert "0 layers" in session.narrative()

def test_record_response_defaults_to_current_layer(session):
    session.advance_layer()
    record = session.record_response("de-tax", "maybe", 5, 0.9)
    assert record.layer == Layer.DATA_EXPOSURE

def test_revisiting_earlier_layer_keeps_completion(session):
    session.advance_layer()
    session.record_response("va-fairness", "yes", 5, 0.8, layer=Layer.VALUE_ALIGNMENT)

    assert session.completed_layers == [Layer.VALUE_ALIGNMENT]
    assert session.current_layer == Layer.DATA_EXPOSURE
    assert session.scores.value_alignment == 100

def test_invalid_response_leaves_state_untouched(session):
    answer_values_layer(session)
    before = session.scores
    with pytest.raises(InvalidResponseError):
        session.record_response("va-extra", "yes", -3, 0.5)
    assert len(session.responses) == 3
    assert session.scores == before

def test_record_answer_uses_catalog_metadata(session):
    record = session.record_answer(CATALOG, "de-tax", "yes", 12)
    assert record.weight == 0.9
    assert record.layer == Layer.DATA_EXPOSURE

def test_record_answer_unknown_question(session):
    with pytest.raises(InvalidResponseError):
        session.record_answer(CATALOG, "missing", "yes", 12)

def test_advance_through_all_layers(session):
    for _ in range(3):
        session.advance_layer()
    assert session.current_layer == Layer.COMMITMENT
    assert not session.progress()["is_complete"]

    session.advance_layer()
    session.advance_layer()
    progress = session.progress()
    assert progress["current_layer"] == "commitment"
    assert progress["current_layer_name"] == "Commitment"
    assert progress["is_complete"]
    assert progress["percentage"] == 100

def test_data_points_counted_once(session):
    assert session.mark_data_point_viewed("dp-tax")
    assert not session.mark_data_point_viewed("dp-tax")
    assert session.mark_data_point_viewed("dp-elder-care-share")

    assert session.seen_data_points == ["dp-tax", "dp-elder-care-share"]
    assert session.scores.data_awareness == pytest.approx(10)

def test_content_triggered_once(session):
    assert session.mark_content_triggered("video-1")
    assert not session.mark_content_triggered("video-1")

def test_record_objection(session):
    objection = session.record_objection("cost", handled=True, counter_argument_viewed=False)
    assert session.objections == [objection]
    assert objection.handled

def test_record_conversion(session):
    conversion = session.record_conversion("petition_sign", {"petition_id": "p-1"})
    assert conversion.type == ConversionType.PETITION_SIGN
    assert conversion.details == {"petition_id": "p-1"}
    assert session.summary()["converted"] is True

def test_record_unknown_conversion(session):
    with pytest.raises(InvalidResponseError) as exc_info:
        session.record_conversion("carrier_pigeon")
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert session.conversions == []

def test_summary(session):
    session.set_lens(PoliticalLens.MID_LEFT)
    answer_values_layer(session)
    session.advance_layer()

    summary = session.summary()
    assert summary["responses"] == 3
    assert summary["completion_rate"] == 25
    assert summary["average_time_per_question"] == 23
    assert summary["result_category"] == "economic"
    assert set(summary["layer_scores"]) == {"value-alignment"}

def test_reset_returns_fresh_state(session):
    session.set_lens(PoliticalLens.FAR_LEFT)
    session.set_email("visitor@example.org")
    answer_values_layer(session)
    session.advance_layer()
    session.mark_data_point_viewed("dp-tax")
    session.record_conversion(ConversionType.EMAIL_SIGNUP)

    new_id = session.reset()

    assert new_id != "test-session"
    assert session.session_id == new_id
    assert session.political_lens is None
    assert session.email is None
    assert session.responses == []
    assert session.completed_layers == []
    assert session.current_layer == Layer.VALUE_ALIGNMENT
    assert session.seen_data_points == []
    assert session.conversions == []
    assert session.scores.persuasion_level == 0

def test_json_round_trip_restores_state_and_scores(session, clock):
    session.set_lens(PoliticalLens.MID_RIGHT)
    session.set_email("visitor@example.org")
    answer_values_layer(session)
    session.advance_layer()
    session.set_question_index(2)
    session.mark_data_point_viewed("dp-tax")
    session.mark_content_triggered("video-1")
    session.record_objection("cost", True, True)
    session.record_conversion(ConversionType.SOCIAL_SHARE, {"network": "x"})

    restored = JourneySession.from_json(session.to_json(), clock=clock)

    assert restored.to_state() == session.to_state()
    assert restored.scores == session.scores
    assert restored.narrative() == session.narrative()
    assert restored.current_question_index == 2

def test_from_json_recomputes_stale_scores(session):
    answer_values_layer(session)
    state = session.to_state().model_copy(update={"scores": session.scores.model_copy(update={"persuasion_level": 1.0})})

    restored = JourneySession.from_state(state)
    assert restored.scores == session.scores

@pytest.mark.parametrize("elapsed", [float("inf"), float("nan")])
def test_non_finite_elapsed_time_rejected(session, elapsed):
    answer_values_layer(session)
    with pytest.raises(InvalidResponseError):
        session.record_response("va-extra", "yes", elapsed, 0.5)

    restored = JourneySession.from_json(session.to_json())
    assert len(restored.responses) == 3
