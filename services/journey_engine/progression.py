import logging
from typing import Dict, List, Optional

from .definitions import LAYER_ORDER
from .models import InvalidResponseError, Layer, now_ms

logger = logging.getLogger(__name__)


class LayerProgression:
    """
    Tracks which layer the visitor is on and which layers are completed.

    Layers are visited in LAYER_ORDER with no skipping. advance() completes the
    current layer and moves to the next one; on the last layer it only marks it
    completed (terminal state). Completed layers are never un-completed.
    """

    def __init__(
        self,
        current_layer: Layer = LAYER_ORDER[0],
        completed_layers: Optional[List[Layer]] = None,
        current_question_index: int = 0,
        layer_started_at: Optional[Dict[Layer, Optional[int]]] = None,
    ):
        self.current_layer = Layer(current_layer)
        # Kept in completion order, which equals LAYER_ORDER order
        self.completed_layers: List[Layer] = [Layer(l) for l in (completed_layers or [])]
        self.current_question_index = current_question_index
        self.layer_started_at: Dict[Layer, Optional[int]] = {layer: None for layer in LAYER_ORDER}
        if layer_started_at:
            self.layer_started_at.update({Layer(k): v for k, v in layer_started_at.items()})

    @property
    def is_complete(self) -> bool:
        return self.current_layer == LAYER_ORDER[-1] and self.current_layer in self.completed_layers

    def advance(self, timestamp: Optional[int] = None) -> Layer:
        """
        Completes the current layer and moves to the next one if it exists.

        Returns:
            The layer that is current after the call.
        """
        if self.current_layer not in self.completed_layers:
            self.completed_layers.append(self.current_layer)
            logger.debug(f"Layer completed: {self.current_layer.value}")

        index = LAYER_ORDER.index(self.current_layer)
        if index < len(LAYER_ORDER) - 1:
            next_layer = LAYER_ORDER[index + 1]
            self.current_layer = next_layer
            self.current_question_index = 0
            self.layer_started_at[next_layer] = timestamp if timestamp is not None else now_ms()
            logger.info(f"Advanced to layer {next_layer.value}")
        else:
            logger.debug("Advance requested on final layer; staying put")
        return self.current_layer

    def set_question_index(self, index: int) -> None:
        if index < 0:
            raise InvalidResponseError(f"Question index must be non-negative, got {index}")
        self.current_question_index = index

    def start(self, timestamp: int) -> None:
        """Stamps the first layer's start time if it hasn't been stamped yet."""
        first = LAYER_ORDER[0]
        if self.layer_started_at.get(first) is None:
            self.layer_started_at[first] = timestamp

    def progress(self) -> Dict[str, int]:
        total = len(LAYER_ORDER)
        completed = len(self.completed_layers)
        return {
            "completed": completed,
            "total": total,
            "percentage": int(round(completed / total * 100)),
        }
