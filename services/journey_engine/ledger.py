import logging
from typing import Iterator, List, Optional, Union

from pydantic import ValidationError

from .models import Answer, InvalidResponseError, Layer, ResponseRecord, now_ms

logger = logging.getLogger(__name__)


class ResponseLedger:
    """
    Append-only log of answered questions for one session.

    Records are immutable once appended. There is no edit or delete; only a full
    session reset empties the ledger (via clear()).
    """

    def __init__(self, records: Optional[List[ResponseRecord]] = None):
        self._records: List[ResponseRecord] = list(records or [])

    def append(
        self,
        question_id: str,
        answer: Union[Answer, str],
        elapsed_seconds: float,
        weight: float,
        layer: Union[Layer, str],
        timestamp: Optional[int] = None,
    ) -> ResponseRecord:
        """
        Validates and appends a response.

        Raises:
            InvalidResponseError: unknown answer or layer, negative elapsed time,
                or a weight outside [0, 1].
        """
        try:
            record = ResponseRecord(
                question_id=question_id,
                answer=answer,
                elapsed_seconds=elapsed_seconds,
                weight=weight,
                layer=layer,
                timestamp=timestamp if timestamp is not None else now_ms(),
            )
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            logger.warning(f"Rejected response for question '{question_id}': invalid {fields}")
            raise InvalidResponseError(f"Invalid response for question '{question_id}': {fields}") from e

        self._records.append(record)
        logger.debug(f"Appended response {question_id}={record.answer.value} to layer {record.layer.value}")
        return record

    def by_layer(self, layer: Layer) -> List[ResponseRecord]:
        return [r for r in self._records if r.layer == layer]

    def records(self) -> List[ResponseRecord]:
        # Copy so callers can't mutate the log
        return list(self._records)

    def clear(self) -> None:
        self._records = []

    def __iter__(self) -> Iterator[ResponseRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
