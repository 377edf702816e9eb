import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Union

from .classifier import classify, coarse_score, result_page
from .definitions import DEFAULT_ASSUMED_TOTAL_DATA_POINTS, LAYER_METADATA, LAYER_ORDER
from .ledger import ResponseLedger
from .loader import QuestionCatalog
from .models import (
    ActionPriority,
    Answer,
    ConversionAction,
    ConversionType,
    InvalidResponseError,
    Layer,
    ObjectionRecord,
    PersuasionBand,
    PoliticalLens,
    ResponseRecord,
    ResultCategory,
    ScoreVector,
    SessionState,
    now_ms,
)
from .narrative import generate_narrative, generate_share_message
from .prioritizer import prioritize_actions
from .progression import LayerProgression
from .scorer import calculate_layer_scores, compute_scores, determine_conviction_level

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return str(uuid.uuid4())


class JourneySession:
    """
    Aggregate root for one visitor's journey.

    Owns the response ledger, layer progression, viewed/triggered content,
    objections and conversions, plus a cached ScoreVector that is recomputed
    after every scoring-relevant event. The cache is never the source of truth:
    calculate_scores() rebuilds it from the ledger and viewed set.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        assumed_total_data_points: int = DEFAULT_ASSUMED_TOTAL_DATA_POINTS,
        clock: Callable[[], int] = now_ms,
    ):
        self.assumed_total_data_points = assumed_total_data_points
        self._clock = clock
        self._init_state(session_id or generate_session_id())

    def _init_state(self, session_id: str) -> None:
        self.session_id = session_id
        self.political_lens: Optional[PoliticalLens] = None
        self.email: Optional[str] = None
        self.started_at: Optional[int] = None
        self.ledger = ResponseLedger()
        self.progression = LayerProgression()
        self.seen_data_points: List[str] = []
        self.triggered_content: List[str] = []
        self.objections: List[ObjectionRecord] = []
        self.conversions: List[ConversionAction] = []
        self.scores = ScoreVector()

    # --- Read-only views ---

    @property
    def responses(self) -> List[ResponseRecord]:
        return self.ledger.records()

    @property
    def current_layer(self) -> Layer:
        return self.progression.current_layer

    @property
    def completed_layers(self) -> List[Layer]:
        return list(self.progression.completed_layers)

    @property
    def current_question_index(self) -> int:
        return self.progression.current_question_index

    # --- Identity ---

    def set_lens(self, lens: Union[PoliticalLens, str]) -> None:
        """Sets the political lens. Only the first call starts the session clock."""
        try:
            self.political_lens = PoliticalLens(lens)
        except ValueError as e:
            raise InvalidResponseError(f"Unknown political lens: {lens}") from e
        if self.started_at is None:
            self.started_at = self._clock()
            self.progression.start(self.started_at)
            logger.info(f"Session {self.session_id} started with lens {self.political_lens.value}", extra={"session_id": self.session_id})

    def set_email(self, email: str) -> None:
        self.email = email

    # --- Progress ---

    def record_response(
        self,
        question_id: str,
        answer: Union[Answer, str],
        elapsed_seconds: float,
        weight: float,
        layer: Optional[Union[Layer, str]] = None,
    ) -> ResponseRecord:
        """
        Appends a response and recomputes scores.

        The layer defaults to the current layer. An earlier layer may be passed
        to replay answers there; completed layers stay completed.
        """
        record = self.ledger.append(
            question_id,
            answer,
            elapsed_seconds,
            weight,
            layer if layer is not None else self.current_layer,
            timestamp=self._clock(),
        )
        self.calculate_scores()
        return record

    def record_answer(
        self,
        catalog: QuestionCatalog,
        question_id: str,
        answer: Union[Answer, str],
        elapsed_seconds: float,
    ) -> ResponseRecord:
        """Records a response using the weight and layer from the question catalog."""
        question = catalog.get(question_id)
        if question is None:
            raise InvalidResponseError(f"Unknown question id: {question_id}")
        return self.record_response(
            question_id, answer, elapsed_seconds, question.persuasion_weight, question.layer
        )

    def advance_layer(self) -> Layer:
        return self.progression.advance(self._clock())

    def set_question_index(self, index: int) -> None:
        self.progression.set_question_index(index)

    # --- Content tracking ---

    def mark_data_point_viewed(self, data_point_id: str) -> bool:
        """Returns False when the data point was already viewed."""
        if data_point_id in self.seen_data_points:
            return False
        self.seen_data_points.append(data_point_id)
        self.calculate_scores()
        return True

    def mark_content_triggered(self, content_id: str) -> bool:
        if content_id in self.triggered_content:
            return False
        self.triggered_content.append(content_id)
        return True

    def record_objection(self, objection_id: str, handled: bool, counter_argument_viewed: bool) -> ObjectionRecord:
        objection = ObjectionRecord(
            objection_id=objection_id,
            handled=handled,
            counter_argument_viewed=counter_argument_viewed,
            timestamp=self._clock(),
        )
        self.objections.append(objection)
        return objection

    def record_conversion(
        self,
        conversion_type: Union[ConversionType, str],
        details: Optional[Dict[str, Any]] = None,
    ) -> ConversionAction:
        try:
            conversion = ConversionAction(
                type=ConversionType(conversion_type),
                timestamp=self._clock(),
                details=details or {},
            )
        except ValueError as e:
            raise InvalidResponseError(f"Unknown conversion type: {conversion_type}") from e
        self.conversions.append(conversion)
        logger.info(f"Session {self.session_id} converted: {conversion.type.value}", extra={"session_id": self.session_id})
        return conversion

    # --- Derived values ---

    def calculate_scores(self) -> ScoreVector:
        self.scores = compute_scores(
            self.ledger, len(self.seen_data_points), self.assumed_total_data_points
        )
        return self.scores

    def coarse_score(self) -> float:
        return coarse_score(self.ledger)

    def result_category(self) -> ResultCategory:
        return classify(self.coarse_score(), self.political_lens)

    def result_page(self) -> Dict[str, Any]:
        return result_page(self.result_category())

    def prioritized_actions(self) -> List[ActionPriority]:
        return prioritize_actions(self.scores)

    def narrative(self) -> str:
        return generate_narrative(self)

    def share_message(self) -> str:
        return generate_share_message(self)

    def conviction_level(self) -> PersuasionBand:
        return determine_conviction_level(self.scores)

    def progress(self) -> Dict[str, Any]:
        return {
            "current_layer": self.current_layer.value,
            "current_layer_name": LAYER_METADATA[self.current_layer]["display_name"],
            "current_question_index": self.current_question_index,
            "completed_layers": [layer.value for layer in self.completed_layers],
            "is_complete": self.progression.is_complete,
            **self.progression.progress(),
        }

    def summary(self) -> Dict[str, Any]:
        """Analytics summary of the journey so far."""
        records = self.responses
        total_time = sum(r.elapsed_seconds for r in records)
        return {
            "session_id": self.session_id,
            "political_lens": self.political_lens.value if self.political_lens else None,
            "responses": len(records),
            "completion_rate": self.progression.progress()["percentage"],
            "average_time_per_question": int(round(total_time / len(records))) if records else 0,
            "layer_scores": calculate_layer_scores(records),
            "converted": bool(self.conversions),
            "result_category": self.result_category().value,
        }

    # --- Lifecycle ---

    def reset(self) -> str:
        """Returns to the initial state under a fresh session id."""
        old_id = self.session_id
        self._init_state(generate_session_id())
        logger.info(f"Session {old_id} reset; new session id {self.session_id}", extra={"session_id": self.session_id})
        return self.session_id

    # --- Serialization ---

    def to_state(self) -> SessionState:
        return SessionState(
            session_id=self.session_id,
            political_lens=self.political_lens,
            email=self.email,
            current_layer=self.current_layer,
            current_question_index=self.current_question_index,
            completed_layers=self.completed_layers,
            layer_started_at=dict(self.progression.layer_started_at),
            responses=self.responses,
            seen_data_points=list(self.seen_data_points),
            triggered_content=list(self.triggered_content),
            objections=list(self.objections),
            conversions=list(self.conversions),
            started_at=self.started_at,
            scores=self.scores,
        )

    @classmethod
    def from_state(
        cls,
        state: SessionState,
        assumed_total_data_points: int = DEFAULT_ASSUMED_TOTAL_DATA_POINTS,
        clock: Callable[[], int] = now_ms,
    ) -> "JourneySession":
        session = cls(state.session_id, assumed_total_data_points, clock)
        session.political_lens = state.political_lens
        session.email = state.email
        session.started_at = state.started_at
        session.ledger = ResponseLedger(state.responses)
        session.progression = LayerProgression(
            current_layer=state.current_layer,
            completed_layers=[l for l in LAYER_ORDER if l in state.completed_layers],
            current_question_index=state.current_question_index,
            layer_started_at=state.layer_started_at,
        )
        session.seen_data_points = list(state.seen_data_points)
        session.triggered_content = list(state.triggered_content)
        session.objections = list(state.objections)
        session.conversions = list(state.conversions)
        # Persisted scores are only a cache; rebuild from the ledger
        session.calculate_scores()
        return session

    def to_json(self) -> str:
        return self.to_state().model_dump_json()

    @classmethod
    def from_json(cls, payload: Union[str, bytes], **kwargs: Any) -> "JourneySession":
        return cls.from_state(SessionState.model_validate_json(payload), **kwargs)
