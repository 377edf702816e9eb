# tests/journey/test_progression.py
import pytest

from services.journey_engine.definitions import LAYER_ORDER
from services.journey_engine.models import InvalidResponseError, Layer
from services.journey_engine.progression import LayerProgression


def test_initial_state():
    progression = LayerProgression()
    assert progression.current_layer == Layer.VALUE_ALIGNMENT
    assert progression.completed_layers == []
    assert progression.current_question_index == 0
    assert not progression.is_complete

def test_advance_reaches_final_layer_after_len_minus_one_calls():
    progression = LayerProgression()
    visited = [progression.current_layer]
    for _ in range(len(LAYER_ORDER) - 1):
        visited.append(progression.advance(timestamp=1))

    assert visited == LAYER_ORDER
    assert progression.current_layer == LAYER_ORDER[-1]

def test_advance_never_regresses_past_final_layer():
    progression = LayerProgression()
    for _ in range(len(LAYER_ORDER) + 3):
        previous_index = LAYER_ORDER.index(progression.current_layer)
        progression.advance(timestamp=1)
        assert LAYER_ORDER.index(progression.current_layer) >= previous_index

    assert progression.current_layer == Layer.COMMITMENT
    assert progression.completed_layers == LAYER_ORDER
    assert progression.is_complete

def test_advance_on_final_layer_is_idempotent():
    progression = LayerProgression(current_layer=Layer.COMMITMENT, completed_layers=LAYER_ORDER[:3])
    progression.advance(timestamp=1)
    progression.advance(timestamp=2)
    assert progression.completed_layers.count(Layer.COMMITMENT) == 1
    assert progression.current_layer == Layer.COMMITMENT

def test_advance_resets_question_index_and_stamps_start_time():
    progression = LayerProgression()
    progression.set_question_index(3)
    progression.advance(timestamp=5000)

    assert progression.current_question_index == 0
    assert progression.layer_started_at[Layer.DATA_EXPOSURE] == 5000

def test_start_only_stamps_first_layer_once():
    progression = LayerProgression()
    progression.start(100)
    progression.start(200)
    assert progression.layer_started_at[Layer.VALUE_ALIGNMENT] == 100

def test_negative_question_index_rejected():
    progression = LayerProgression()
    with pytest.raises(InvalidResponseError):
        progression.set_question_index(-1)

def test_progress_counts_completed_layers():
    progression = LayerProgression()
    progression.advance(timestamp=1)
    assert progression.progress() == {"completed": 1, "total": 4, "percentage": 25}
