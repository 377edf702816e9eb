# services/journey_engine/narrative.py
# Generates the personalised result narrative and share message for a session.

import logging
from typing import Any, Dict, Optional

from .classifier import classify, coarse_score, determine_persuasion_band
from .definitions import AFFIRMATIVE_ANSWERS, DEFAULT_LENS, IDEOLOGY_LANGUAGE
from .models import PersuasionBand, PoliticalLens, ResultCategory

logger = logging.getLogger(__name__)

# Answer ratio above which the strong insight phrasing is used
STRONG_INSIGHT_RATIO = 0.7

PERSUASION_PROFILES: Dict[PersuasionBand, Dict[str, Any]] = {
    PersuasionBand.SKEPTIC: {
        "score_range": (0, 3),
        "narrative_template": "explore",
        "emotional_tone": "cautious",
    },
    PersuasionBand.CURIOUS: {
        "score_range": (4, 6),
        "narrative_template": "inform",
        "emotional_tone": "optimistic",
    },
    PersuasionBand.ENGAGED: {
        "score_range": (7, 9),
        "narrative_template": "inspire",
        "emotional_tone": "passionate",
    },
    PersuasionBand.CHAMPION: {
        "score_range": (10, 12),
        "narrative_template": "activate",
        "emotional_tone": "urgent",
    },
}

# Key insight phrasing by result category: (strong, soft)
KEY_INSIGHTS: Dict[ResultCategory, Dict[str, str]] = {
    ResultCategory.REVENUE: {
        "strong": "pathways to citizenship could generate billions in revenue while strengthening communities",
        "soft": "immigration policy has significant economic implications worth examining",
    },
    ResultCategory.ECONOMIC: {
        "strong": "undocumented immigrants are essential to industries that power our daily lives",
        "soft": "immigration plays a complex role in our economic landscape",
    },
    ResultCategory.SECURITY: {
        "strong": "comprehensive immigration reform enhances national security more than deportation",
        "soft": "security concerns require nuanced, fact-based approaches",
    },
    ResultCategory.DEMOGRAPHIC: {
        "strong": "immigration is critical to sustaining communities and institutions across America",
        "soft": "demographic trends reveal important patterns about immigration",
    },
}

# Narrative templates by persuasion band and lens
NARRATIVE_TEMPLATES: Dict[PersuasionBand, Dict[PoliticalLens, str]] = {
    PersuasionBand.SKEPTIC: {
        PoliticalLens.FAR_LEFT: "You've explored some challenging perspectives on immigration policy. While the data you've seen highlights {keyInsight}, we understand you may have questions about systemic approaches. What matters is that you're thinking critically about how {value1} and {value2} intersect with this issue. Every journey toward understanding starts with curiosity.",
        PoliticalLens.MID_LEFT: "Thanks for exploring the nuances of immigration policy with us. You've encountered data showing {keyInsight}, and while you may still be weighing the evidence, your engagement shows you care about finding {value1} solutions. We believe that when armed with facts, people like you can make a real difference.",
        PoliticalLens.MID_RIGHT: "You've taken time to review important data about immigration's impact. The information you've seen regarding {keyInsight} presents real questions about {concern1} and {value1}. We appreciate your careful consideration of this complex issue - thoughtful analysis is the foundation of sound policy.",
        PoliticalLens.FAR_RIGHT: "Thank you for examining the facts about immigration. The data you've reviewed on {keyInsight} speaks to legitimate concerns about {concern1} and {value1}. Your attention to these issues matters, and we hope this information helps you think through what's at stake for our nation.",
    },
    PersuasionBand.CURIOUS: {
        PoliticalLens.FAR_LEFT: "Your journey through this data reveals a growing understanding of how immigration intersects with {value1} and {value2}. You've discovered that {keyInsight}, which challenges some common misconceptions. Your {layerCount} layers of engagement show you're ready to move beyond simple narratives and embrace the complexity. The question now: how will you use this knowledge to advance {frame}?",
        PoliticalLens.MID_LEFT: "You're clearly someone who values {value1} and {value2}, and your exploration of immigration data reflects that. Through {layerCount} layers of questions, you've learned that {keyInsight}. This kind of evidence-based understanding is exactly what we need more of. The path forward starts with people like you who are willing to engage with the facts.",
        PoliticalLens.MID_RIGHT: "Your thoughtful engagement with {layerCount} layers of immigration data shows a commitment to understanding the real impacts. You've discovered that {keyInsight}, which has important implications for {concern1} and {value1}. This balanced perspective - grounded in facts rather than rhetoric - is crucial for finding solutions that work.",
        PoliticalLens.FAR_RIGHT: "You've engaged seriously with {layerCount} layers of immigration data, showing a real commitment to understanding the facts. The evidence you've reviewed reveals that {keyInsight}, which directly relates to concerns about {concern1} and {value1}. Your willingness to examine the data puts you ahead of those who rely only on talking points.",
    },
    PersuasionBand.ENGAGED: {
        PoliticalLens.FAR_LEFT: "Your deep engagement speaks volumes. Through {layerCount} layers, you've uncovered powerful evidence that {keyInsight}. This aligns with your commitment to {value1} and {value2}, and shows you understand that immigration isn't just about policy - it's about people and systemic change. You've moved beyond awareness to conviction. The data has shown you why {frame} matters, and why we need voices like yours demanding action now.",
        PoliticalLens.MID_LEFT: "You've demonstrated real commitment to understanding immigration through {layerCount} layers of engagement. The data has revealed that {keyInsight}, confirming what many of us believe: this is about {value1} and {value2}. Your journey shows you're not content with surface-level understanding. You're someone who can translate evidence into action, and that's exactly what this moment demands.",
        PoliticalLens.MID_RIGHT: "Your thorough exploration of {layerCount} layers shows exceptional dedication to understanding this issue. You've learned that {keyInsight}, which has significant implications for {value1} and {concern1}. This level of engagement - seeking facts, weighing evidence, considering consequences - is precisely what responsible citizenship looks like. You're positioned to be a voice of reason in these debates.",
        PoliticalLens.FAR_RIGHT: "Your comprehensive review of {layerCount} layers of data demonstrates serious commitment to the facts. The evidence conclusively shows that {keyInsight}, directly addressing concerns about {concern1} and {value1}. You've gone beyond rhetoric to understand the real stakes. This is about {frame}, and you've shown you're ready to stand for what the data proves matters.",
    },
    PersuasionBand.CHAMPION: {
        PoliticalLens.FAR_LEFT: "You are exactly what this movement needs. Your journey through {layerCount} layers has revealed undeniable truths: {keyInsight}. This isn't just data - it's a call to action for {frame}. You understand that {value1} and {value2} aren't abstract ideals but urgent necessities. You've seen the evidence. You've felt the weight of what's at stake. Now it's time to turn your conviction into action that creates real change.",
        PoliticalLens.MID_LEFT: "You're a champion for evidence-based change. Through {layerCount} layers of deep engagement, you've discovered that {keyInsight}. This confirms what you already knew in your heart about {value1} and {value2}, but now you have the data to back it up. Your comprehensive understanding makes you uniquely positioned to advocate for reform. The question isn't whether to act - it's how quickly you can start.",
        PoliticalLens.MID_RIGHT: "Your exceptional engagement with {layerCount} layers of data has equipped you with comprehensive understanding. The evidence is clear: {keyInsight}. This has profound implications for {value1} and {concern1}. You've done the work most people won't do - diving deep into facts and emerging with conviction. You're now uniquely positioned to be a voice for balanced, effective policy. Leadership demands action.",
        PoliticalLens.FAR_RIGHT: "You've completed a comprehensive review of the facts, and the evidence is overwhelming: {keyInsight}. Your journey through {layerCount} layers proves you're serious about {value1} and {concern1}. You understand the stakes better than most. You've seen the data that others ignore. You know this is about {frame}, and you have the facts to prove it. Champions like you don't just understand the issue - you act on it.",
    },
}

SHARE_MESSAGES: Dict[PersuasionBand, str] = {
    PersuasionBand.SKEPTIC: "I just explored some eye-opening data about immigration policy. Worth checking out.",
    PersuasionBand.CURIOUS: "I learned some surprising facts about immigration that challenge common assumptions. Take a look.",
    PersuasionBand.ENGAGED: "The data on immigration is compelling. I'm convinced we need to talk about {frame}.",
    PersuasionBand.CHAMPION: "I just completed a deep dive into immigration data and I'm ready to act. Join me in pushing for {frame}.",
}


def _effective_lens(lens: Optional[PoliticalLens]) -> PoliticalLens:
    if lens is None:
        logger.info(f"No political lens set; using default lens {DEFAULT_LENS.value}")
        return DEFAULT_LENS
    return lens


def answer_ratio(responses) -> float:
    """Affirmative answers as a share of all responses (0 with no responses)."""
    records = list(responses)
    if not records:
        return 0.0
    affirmative = sum(1 for r in records if r.answer in AFFIRMATIVE_ANSWERS)
    return affirmative / len(records)


def generate_key_insight(category: ResultCategory, ratio: float) -> str:
    strength = "strong" if ratio > STRONG_INSIGHT_RATIO else "soft"
    return KEY_INSIGHTS[category][strength]


def get_persuasion_profile(score: float) -> Dict[str, Any]:
    band = determine_persuasion_band(score)
    return {"level": band, **PERSUASION_PROFILES[band]}


def generate_narrative(session) -> str:
    """
    Builds the result narrative for a session.

    The template is picked by persuasion band (coarse 0-12 score) and lens, then
    filled with the key insight, completed-layer count and lens vocabulary. An
    unset lens falls back to DEFAULT_LENS; this never raises.
    """
    lens = _effective_lens(session.political_lens)
    responses = session.responses
    score = coarse_score(responses)
    band = determine_persuasion_band(score)
    category = classify(score, lens)
    ideology = IDEOLOGY_LANGUAGE[lens]

    tokens = {
        "keyInsight": generate_key_insight(category, answer_ratio(responses)),
        "layerCount": str(len(session.completed_layers)),
        "value1": ideology["values"][0],
        "value2": ideology["values"][1],
        "frame": ideology["frames"][0],
        "concern1": ideology["concerns"][0],
    }
    narrative = NARRATIVE_TEMPLATES[band][lens].format(**tokens)
    logger.debug(f"Generated {band.value}/{lens.value} narrative for session {session.session_id}")
    return narrative


def generate_share_message(session) -> str:
    lens = _effective_lens(session.political_lens)
    band = determine_persuasion_band(coarse_score(session.responses))
    return SHARE_MESSAGES[band].format(frame=IDEOLOGY_LANGUAGE[lens]["frames"][0])
