# tests/journey/test_classifier.py
import pytest

from services.journey_engine.classifier import (
    RESULT_PAGE_CONTENT,
    classify,
    coarse_score,
    determine_persuasion_band,
    determine_result_band,
    lens_side,
    result_page,
)
from services.journey_engine.ledger import ResponseLedger
from services.journey_engine.models import Layer, PersuasionBand, PoliticalLens, ResultCategory

ALL_LENSES = list(PoliticalLens) + [None]


def test_coarse_score_weights_answers():
    ledger = ResponseLedger()
    for answer in ["yes", "maybe", "no", "yes"]:
        ledger.append("q", answer, 1, 0.5, Layer.VALUE_ALIGNMENT)
    assert coarse_score(ledger) == 5

def test_coarse_score_empty():
    assert coarse_score([]) == 0

@pytest.mark.parametrize("score, expected", [
    (0, "low"),
    (3.5, "low"),
    (4, "mid"),
    (7, "mid"),
    (8, "high"),
    (12, "high"),
])
def test_determine_result_band_thresholds(score, expected):
    assert determine_result_band(score) == expected

@pytest.mark.parametrize("lens, side", [
    (PoliticalLens.FAR_LEFT, "left"),
    (PoliticalLens.MID_LEFT, "left"),
    (PoliticalLens.MID_RIGHT, "right"),
    (PoliticalLens.FAR_RIGHT, "right"),
    (None, "left"),
])
def test_lens_side(lens, side):
    assert lens_side(lens) == side

@pytest.mark.parametrize("score, lens, expected", [
    (10, PoliticalLens.FAR_LEFT, ResultCategory.REVENUE),
    (8, PoliticalLens.MID_LEFT, ResultCategory.REVENUE),
    (8, PoliticalLens.MID_RIGHT, ResultCategory.SECURITY),
    (12, PoliticalLens.FAR_RIGHT, ResultCategory.SECURITY),
    (4, PoliticalLens.FAR_RIGHT, ResultCategory.DEMOGRAPHIC),
    (6, PoliticalLens.MID_LEFT, ResultCategory.ECONOMIC),
    (0, PoliticalLens.FAR_LEFT, ResultCategory.ECONOMIC),
    (2, PoliticalLens.MID_RIGHT, ResultCategory.DEMOGRAPHIC),
    (0, None, ResultCategory.ECONOMIC),
    (9, None, ResultCategory.REVENUE),
])
def test_classify(score, lens, expected):
    assert classify(score, lens) == expected

def test_classify_is_total():
    """Every lens, unset included, maps every reachable score to a category."""
    for lens in ALL_LENSES:
        for doubled in range(0, 41):
            assert isinstance(classify(doubled / 2, lens), ResultCategory)

@pytest.mark.parametrize("score, expected", [
    (0, PersuasionBand.SKEPTIC),
    (3, PersuasionBand.SKEPTIC),
    (4, PersuasionBand.CURIOUS),
    (6, PersuasionBand.CURIOUS),
    (7, PersuasionBand.ENGAGED),
    (9.5, PersuasionBand.ENGAGED),
    (10, PersuasionBand.CHAMPION),
    (12, PersuasionBand.CHAMPION),
])
def test_determine_persuasion_band(score, expected):
    assert determine_persuasion_band(score) == expected

def test_result_page_for_every_category():
    for category in ResultCategory:
        page = result_page(category)
        assert page["category"] == category.value
        assert page["title"] == RESULT_PAGE_CONTENT[category]["title"]
        assert len(page["ctas"]) == 2
        assert page["bullets"] == RESULT_PAGE_CONTENT[category]["bullets"]
        assert page["bullets"]

def test_result_page_returns_a_copy_of_ctas():
    page = result_page(ResultCategory.REVENUE)
    page["ctas"].append("something-else")
    page["bullets"].clear()
    fresh = result_page(ResultCategory.REVENUE)
    assert fresh["ctas"] == ["petition", "contact-reps"]
    assert len(fresh["bullets"]) == 6
