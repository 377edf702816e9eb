from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from services.journey_engine.models import Answer, ConversionType, Layer, PoliticalLens

class CreateSessionRequest(BaseModel):
    political_lens: Optional[PoliticalLens] = None

class SetLensRequest(BaseModel):
    political_lens: PoliticalLens

class ResponseRequest(BaseModel):
    question_id: str
    answer: Answer
    elapsed_seconds: float = Field(..., allow_inf_nan=False)
    # Either weight (+ optional layer) or neither, in which case the question catalog supplies both
    weight: Optional[float] = Field(None, allow_inf_nan=False)
    layer: Optional[Layer] = None

class DataPointViewedRequest(BaseModel):
    data_point_id: str

class ConversionRequest(BaseModel):
    type: ConversionType
    details: Dict[str, Any] = Field(default_factory=dict)

class SessionView(BaseModel):
    session_id: str
    political_lens: Optional[PoliticalLens]
    scores: Dict[str, int]  # rounded for display
    progress: Dict[str, Any]
    responses: int
    seen_data_points: List[str]
    conversions: int

class ActionView(BaseModel):
    action_id: str
    priority: int
    reasoning: str

class ResultView(BaseModel):
    session_id: str
    result_category: str
    result_page: Dict[str, Any]
    conviction_level: str
    scores: Dict[str, int]
    actions: List[ActionView]
    narrative: str
    share_message: str
