import time
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PoliticalLens(str, Enum):
    FAR_LEFT = "far-left"
    MID_LEFT = "mid-left"
    MID_RIGHT = "mid-right"
    FAR_RIGHT = "far-right"


class Layer(str, Enum):
    VALUE_ALIGNMENT = "value-alignment"
    DATA_EXPOSURE = "data-exposure"
    OBJECTION_HANDLING = "objection-handling"
    COMMITMENT = "commitment"


class Answer(str, Enum):
    # Binary
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"
    # Scaled agreement (Likert)
    STRONGLY_AGREE = "strongly-agree"
    AGREE = "agree"
    NEUTRAL = "neutral"
    DISAGREE = "disagree"
    STRONGLY_DISAGREE = "strongly-disagree"
    # Exploratory
    TELL_ME_MORE = "tell-me-more"
    NOT_CONVINCED = "not-convinced"
    SKIP = "skip"


class ConversionType(str, Enum):
    EMAIL_SIGNUP = "email_signup"
    SOCIAL_SHARE = "social_share"
    DONATION = "donation"
    PETITION_SIGN = "petition_sign"
    CONTACT_REP = "contact_rep"


class ResultCategory(str, Enum):
    REVENUE = "revenue"
    ECONOMIC = "economic"
    SECURITY = "security"
    DEMOGRAPHIC = "demographic"


class PersuasionBand(str, Enum):
    SKEPTIC = "skeptic"
    CURIOUS = "curious"
    ENGAGED = "engaged"
    CHAMPION = "champion"


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class ResponseRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str = Field(..., min_length=1)
    answer: Answer
    elapsed_seconds: float = Field(..., ge=0, allow_inf_nan=False)
    weight: float = Field(..., ge=0, le=1, allow_inf_nan=False) # persuasion weight from question metadata
    layer: Layer
    timestamp: int # epoch ms


class ConversionAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ConversionType
    timestamp: int
    details: Dict[str, Any] = Field(default_factory=dict)


class ObjectionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    objection_id: str
    handled: bool
    counter_argument_viewed: bool
    timestamp: int


class ScoreVector(BaseModel):
    """Four independent engagement metrics, each in [0, 100]. Unrounded."""
    value_alignment: float = 0.0
    data_awareness: float = 0.0
    persuasion_level: float = 0.0
    engagement_depth: float = 0.0

    def rounded(self) -> Dict[str, int]:
        """Integer percentages for display."""
        return {name: int(round(value)) for name, value in self.model_dump().items()}


class ActionPriority(BaseModel):
    action_id: str
    priority: int = Field(..., ge=0, le=100)
    reasoning: str


class SessionState(BaseModel):
    """Persisted layout of a journey session. Timestamps are epoch ms."""
    session_id: str
    political_lens: Optional[PoliticalLens] = None
    email: Optional[str] = None
    current_layer: Layer = Layer.VALUE_ALIGNMENT
    current_question_index: int = 0
    completed_layers: List[Layer] = Field(default_factory=list)
    layer_started_at: Dict[Layer, Optional[int]] = Field(default_factory=dict)
    responses: List[ResponseRecord] = Field(default_factory=list)
    seen_data_points: List[str] = Field(default_factory=list)
    triggered_content: List[str] = Field(default_factory=list)
    objections: List[ObjectionRecord] = Field(default_factory=list)
    conversions: List[ConversionAction] = Field(default_factory=list)
    started_at: Optional[int] = None
    scores: ScoreVector = Field(default_factory=ScoreVector)


# Custom Error Classes
class JourneyError(Exception):
    """Base class for journey engine errors."""
    pass

class InvalidResponseError(JourneyError, ValueError):
    """Raised when a response, layer or other event input is out of range or unknown."""
    pass

class SessionNotFoundError(JourneyError, KeyError):
    """Raised when a session id has no in-memory or persisted state."""
    pass

class StorageError(JourneyError):
    """Raised by storage backends; the session store logs and absorbs it."""
    pass
