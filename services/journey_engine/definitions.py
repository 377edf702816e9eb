# services/journey_engine/definitions.py
# Static definitions for the journey: layer order, answer scoring and lens vocabulary.

from typing import Dict, FrozenSet, List

from .models import Answer, Layer, PoliticalLens

# --- Layers ---

LAYER_ORDER: List[Layer] = [
    Layer.VALUE_ALIGNMENT,
    Layer.DATA_EXPOSURE,
    Layer.OBJECTION_HANDLING,
    Layer.COMMITMENT,
]

LAYER_METADATA: Dict[Layer, Dict[str, str]] = {
    Layer.VALUE_ALIGNMENT: {
        "display_name": "Value Alignment",
        "description": "Connect with your core values",
    },
    Layer.DATA_EXPOSURE: {
        "display_name": "Data & Reality",
        "description": "Explore the facts and data",
    },
    Layer.OBJECTION_HANDLING: {
        "display_name": "Objection Handling",
        "description": "Weigh the counter-arguments",
    },
    Layer.COMMITMENT: {
        "display_name": "Commitment",
        "description": "Take action and make a difference",
    },
}

# Layer whose affirmative share drives the value alignment metric
VALUES_LAYER = Layer.VALUE_ALIGNMENT

# --- Answers ---

# Every answer falls in exactly one polarity and scores as that polarity:
# affirmative 1, undecided 0.5, negative 0.
AFFIRMATIVE_ANSWERS: FrozenSet[Answer] = frozenset({
    Answer.YES,
    Answer.STRONGLY_AGREE,
    Answer.AGREE,
})

UNDECIDED_ANSWERS: FrozenSet[Answer] = frozenset({
    Answer.MAYBE,
    Answer.NEUTRAL,
    Answer.TELL_ME_MORE,
})

NEGATIVE_ANSWERS: FrozenSet[Answer] = frozenset({
    Answer.NO,
    Answer.DISAGREE,
    Answer.STRONGLY_DISAGREE,
    Answer.NOT_CONVINCED,
    Answer.SKIP,
})

POLARITY_SCORES: Dict[FrozenSet[Answer], float] = {
    AFFIRMATIVE_ANSWERS: 1.0,
    UNDECIDED_ANSWERS: 0.5,
    NEGATIVE_ANSWERS: 0.0,
}

ANSWER_SCORES: Dict[Answer, float] = {
    answer: score
    for answers, score in POLARITY_SCORES.items()
    for answer in answers
}

# Points per answer on the coarse classifier scale (yes=2, maybe=1, no=0)
COARSE_POINTS_PER_ANSWER = 2

# --- Scoring constants ---

DEFAULT_ASSUMED_TOTAL_DATA_POINTS = 20
ENGAGEMENT_SATURATION_SECONDS = 60

# --- Lenses ---

DEFAULT_LENS = PoliticalLens.MID_LEFT

LEFT_LENSES: FrozenSet[PoliticalLens] = frozenset({
    PoliticalLens.FAR_LEFT,
    PoliticalLens.MID_LEFT,
})

# Ideology-specific language patterns
IDEOLOGY_LANGUAGE: Dict[PoliticalLens, Dict[str, List[str]]] = {
    PoliticalLens.FAR_LEFT: {
        "values": ["justice", "equity", "solidarity", "human rights"],
        "frames": ["systemic change", "collective action", "transformative policy"],
        "concerns": ["inequality", "exploitation", "marginalization"],
    },
    PoliticalLens.MID_LEFT: {
        "values": ["fairness", "opportunity", "compassion", "progress"],
        "frames": ["practical solutions", "evidence-based policy", "reform"],
        "concerns": ["inequality", "access", "representation"],
    },
    PoliticalLens.MID_RIGHT: {
        "values": ["security", "prosperity", "stability", "responsibility"],
        "frames": ["fiscal prudence", "rule of law", "balanced approach"],
        "concerns": ["costs", "safety", "sustainability"],
    },
    PoliticalLens.FAR_RIGHT: {
        "values": ["sovereignty", "security", "tradition", "order"],
        "frames": ["national interest", "border control", "law and order"],
        "concerns": ["security threats", "economic burden", "sovereignty"],
    },
}
