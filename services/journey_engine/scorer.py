# services/journey_engine/scorer.py
# Derives the four engagement metrics from the response ledger and viewed content.

import logging
import math
from typing import Dict, Iterable, List

from .definitions import (
    AFFIRMATIVE_ANSWERS,
    ANSWER_SCORES,
    DEFAULT_ASSUMED_TOTAL_DATA_POINTS,
    ENGAGEMENT_SATURATION_SECONDS,
    LAYER_ORDER,
    VALUES_LAYER,
)
from .models import PersuasionBand, ResponseRecord, ScoreVector

logger = logging.getLogger(__name__)


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def answer_score(record: ResponseRecord) -> float:
    return ANSWER_SCORES[record.answer]


# --- Scoring Functions ---

def calculate_value_alignment(responses: Iterable[ResponseRecord]) -> float:
    """Share of affirmative answers within the values layer, 0-100."""
    layer_responses = [r for r in responses if r.layer == VALUES_LAYER]
    if not layer_responses:
        return 0.0
    affirmative = sum(1 for r in layer_responses if r.answer in AFFIRMATIVE_ANSWERS)
    return _clamp(affirmative / len(layer_responses) * 100)


def calculate_data_awareness(viewed_count: int, assumed_total: int = DEFAULT_ASSUMED_TOTAL_DATA_POINTS) -> float:
    """Viewed data points against a fixed catalog size, capped at 100."""
    if assumed_total <= 0:
        return 0.0
    return _clamp(min(1.0, viewed_count / assumed_total) * 100)


def calculate_persuasion_level(responses: Iterable[ResponseRecord]) -> float:
    """Average answer score weighted by each question's persuasion weight."""
    records = list(responses)
    # fsum keeps the result independent of ledger order
    weighted_sum = math.fsum(answer_score(r) * r.weight for r in records)
    total_weight = math.fsum(r.weight for r in records)
    if total_weight <= 0:
        return 0.0
    return _clamp(weighted_sum / total_weight * 100)


def calculate_engagement_depth(responses: Iterable[ResponseRecord]) -> float:
    """
    Log-saturating transform of average seconds per response.
    Reaches 100 at an average of ENGAGEMENT_SATURATION_SECONDS.
    """
    times = [r.elapsed_seconds for r in responses]
    if not times:
        return 0.0
    avg_time = math.fsum(times) / len(times)
    normalized = math.log(avg_time + 1) / math.log(ENGAGEMENT_SATURATION_SECONDS + 1)
    return _clamp(min(1.0, normalized) * 100)


def compute_scores(
    responses: Iterable[ResponseRecord],
    viewed_count: int,
    assumed_total: int = DEFAULT_ASSUMED_TOTAL_DATA_POINTS,
) -> ScoreVector:
    """
    Computes the full score vector. Pure: the same ledger contents and viewed
    count always give the same vector, regardless of record order.
    """
    records = list(responses)
    scores = ScoreVector(
        value_alignment=calculate_value_alignment(records),
        data_awareness=calculate_data_awareness(viewed_count, assumed_total),
        persuasion_level=calculate_persuasion_level(records),
        engagement_depth=calculate_engagement_depth(records),
    )
    logger.debug(f"Computed scores: {scores.model_dump()}")
    return scores


def calculate_layer_scores(responses: Iterable[ResponseRecord]) -> Dict[str, float]:
    """Persuasion level per layer, for layers that have responses."""
    records = list(responses)
    layer_scores: Dict[str, float] = {}
    for layer in LAYER_ORDER:
        layer_records: List[ResponseRecord] = [r for r in records if r.layer == layer]
        if layer_records:
            layer_scores[layer.value] = calculate_persuasion_level(layer_records)
    return layer_scores


def determine_conviction_level(scores: ScoreVector) -> PersuasionBand:
    """Buckets a visitor by persuasion and engagement on the 0-100 scale."""
    if scores.persuasion_level >= 75 and scores.engagement_depth >= 70:
        return PersuasionBand.CHAMPION
    elif scores.persuasion_level >= 50:
        return PersuasionBand.ENGAGED
    elif scores.engagement_depth >= 50:
        return PersuasionBand.CURIOUS
    return PersuasionBand.SKEPTIC
