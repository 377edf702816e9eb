import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List

from .classifier import COARSE_SCALE_MAX, determine_persuasion_band
from .models import ActionPriority, PersuasionBand, ScoreVector

logger = logging.getLogger(__name__)

# Catalog order is the tie-break order
ACTION_CATALOG: List[str] = ["spread-word", "petition", "donation", "contact-reps"]

# CTA priority based on persuasion band
ACTION_BASE_PRIORITIES: Dict[PersuasionBand, Dict[str, int]] = {
    PersuasionBand.SKEPTIC: {
        "spread-word": 30,
        "petition": 50,
        "donation": 20,
        "contact-reps": 40,
    },
    PersuasionBand.CURIOUS: {
        "spread-word": 60,
        "petition": 70,
        "donation": 40,
        "contact-reps": 65,
    },
    PersuasionBand.ENGAGED: {
        "spread-word": 80,
        "petition": 85,
        "donation": 70,
        "contact-reps": 90,
    },
    PersuasionBand.CHAMPION: {
        "spread-word": 95,
        "petition": 100,
        "donation": 90,
        "contact-reps": 100,
    },
}

BAND_REASONING: Dict[PersuasionBand, str] = {
    PersuasionBand.CHAMPION: "Your conviction demands action",
    PersuasionBand.ENGAGED: "You're ready to make a difference",
    PersuasionBand.CURIOUS: "Take the next step in your journey",
    PersuasionBand.SKEPTIC: "Explore ways to stay engaged",
}


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def band_for_persuasion_level(persuasion_level: float) -> PersuasionBand:
    """Projects the 0-100 persuasion level onto the coarse 0-12 scale and bands it."""
    return determine_persuasion_band(persuasion_level * COARSE_SCALE_MAX / 100)


def prioritize_actions(scores: ScoreVector) -> List[ActionPriority]:
    """
    Ranks the CTA catalog for the given scores.

    priority = round((base + persuasion_level) / 2), sorted descending.
    sorted() is stable, so equal priorities keep catalog order.
    """
    persuasion_level = scores.persuasion_level
    band = band_for_persuasion_level(persuasion_level)
    base_priorities = ACTION_BASE_PRIORITIES[band]
    reasoning = BAND_REASONING[band]

    actions = []
    for action_id in ACTION_CATALOG:
        priority = _round_half_up((base_priorities[action_id] + persuasion_level) / 2)
        actions.append(ActionPriority(
            action_id=action_id,
            priority=max(0, min(100, priority)),
            reasoning=reasoning,
        ))

    ranked = sorted(actions, key=lambda a: a.priority, reverse=True)
    logger.debug(f"Prioritized actions for band {band.value}: {[(a.action_id, a.priority) for a in ranked]}")
    return ranked
