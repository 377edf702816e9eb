# services/journey_engine/classifier.py
# Maps the coarse weighted-answer score and political lens to a result category.

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .definitions import ANSWER_SCORES, COARSE_POINTS_PER_ANSWER, DEFAULT_LENS, LEFT_LENSES
from .models import PersuasionBand, PoliticalLens, ResponseRecord, ResultCategory

logger = logging.getLogger(__name__)

# Result bands, highest threshold first; lower edge inclusive
RESULT_BAND_THRESHOLDS: List[Tuple[str, float]] = [
    ("high", 8),
    ("mid", 4),
    ("low", 0),
]

RESULT_CATEGORY_TABLE: Dict[Tuple[str, str], ResultCategory] = {
    ("high", "left"): ResultCategory.REVENUE,
    ("high", "right"): ResultCategory.SECURITY,
    ("mid", "left"): ResultCategory.ECONOMIC,
    ("mid", "right"): ResultCategory.DEMOGRAPHIC,
    ("low", "left"): ResultCategory.ECONOMIC,
    ("low", "right"): ResultCategory.DEMOGRAPHIC,
}

# Persuasion bands on the same coarse scale (max 12 for six binary questions)
PERSUASION_BAND_THRESHOLDS: List[Tuple[PersuasionBand, float]] = [
    (PersuasionBand.CHAMPION, 10),
    (PersuasionBand.ENGAGED, 7),
    (PersuasionBand.CURIOUS, 4),
    (PersuasionBand.SKEPTIC, 0),
]

COARSE_SCALE_MAX = 12

RESULT_PAGE_CONTENT: Dict[ResultCategory, Dict[str, Any]] = {
    ResultCategory.REVENUE: {
        "title": "Revenue Generation",
        "bullets": [
            "Generated from a fine of $30,000 collected from each undocumented immigrant",
            "More tax-paying members and companies in US society",
            "Lower costs for the healthcare system",
            "More legal applicants for the banking industry",
            "Lower risk of money moving offshore when people face deportation",
            "Room for immigrant-owned companies to expand the US economy",
        ],
        "ctas": ["petition", "contact-reps"],
    },
    ResultCategory.ECONOMIC: {
        "title": "Economic Impact",
        "bullets": [
            "Percent of undocumented immigrants working in elder care",
            "Percent of undocumented immigrants working in construction",
            "Percent of undocumented immigrants working in agriculture",
            "Percent of undocumented immigrants working in logistics and warehousing",
            "Percent of undocumented immigrants working in transportation and shipping",
            "Percent of undocumented immigrants working in manufacturing",
        ],
        "ctas": ["donation", "spread-word"],
    },
    ResultCategory.SECURITY: {
        "title": "National Security",
        "bullets": [
            "Collected fines could fund the border wall sooner",
            "Frees ICE to focus on criminal elements",
            "Creates safer and more stable communities",
            "Could open a path for undocumented immigrants to join the military",
            "Could create more aligned countries in the NORTHCOM and SOUTHCOM areas of responsibility",
        ],
        "ctas": ["spread-word", "donation"],
    },
    ResultCategory.DEMOGRAPHIC: {
        "title": "Demographic Impact",
        "bullets": [
            "Future population growth with and without undocumented immigrants",
            "A larger tax base for smaller communities struggling to keep their infrastructure intact",
            "More legal immigrants sustain small-town economies and participation in schools, churches and charities",
        ],
        "ctas": ["contact-reps", "petition"],
    },
}


def coarse_score(responses: Iterable[ResponseRecord]) -> float:
    """Total weighted affirmative answers: yes=2, maybe=1, no=0 per response."""
    return sum(ANSWER_SCORES[r.answer] * COARSE_POINTS_PER_ANSWER for r in responses)


def lens_side(lens: Optional[PoliticalLens]) -> str:
    """Collapses the lens to 'left' or 'right'; an unset lens uses the default lens."""
    effective = lens if lens is not None else DEFAULT_LENS
    return "left" if effective in LEFT_LENSES else "right"


def determine_result_band(score: float) -> str:
    for band, threshold in RESULT_BAND_THRESHOLDS:
        if score >= threshold:
            return band
    # Negative scores can't come out of coarse_score, but keep the function total
    return RESULT_BAND_THRESHOLDS[-1][0]


def determine_persuasion_band(score: float) -> PersuasionBand:
    for band, threshold in PERSUASION_BAND_THRESHOLDS:
        if score >= threshold:
            return band
    return PersuasionBand.SKEPTIC


def classify(score: float, lens: Optional[PoliticalLens]) -> ResultCategory:
    """
    Maps a coarse score and lens to a result category.

    Total for every lens (including None) and every non-negative score.
    """
    band = determine_result_band(score)
    side = lens_side(lens)
    category = RESULT_CATEGORY_TABLE[(band, side)]
    logger.debug(f"Classified score={score} lens={lens} as {band}/{side} -> {category.value}")
    return category


def result_page(category: ResultCategory) -> Dict[str, Any]:
    """Title, supporting bullets and recommended CTA ids for the result page of a category."""
    content = RESULT_PAGE_CONTENT[category]
    return {
        "category": category.value,
        "title": content["title"],
        "bullets": list(content["bullets"]),
        "ctas": list(content["ctas"]),
    }
