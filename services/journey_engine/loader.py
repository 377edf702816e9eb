import logging
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from services.journey_engine.models import Layer

logger = logging.getLogger(__name__)


class CatalogValidationError(ValueError):
    """Custom exception for question catalog errors not covered by Pydantic."""
    pass


class QuestionMetadata(BaseModel):
    id: str
    layer: Layer
    text: str = ""
    persuasion_weight: float = Field(..., ge=0, le=1)
    data_point_id: Optional[str] = None # auxiliary content revealed with this question


class QuestionCatalog(BaseModel):
    version: str
    questions: List[QuestionMetadata]

    def get(self, question_id: str) -> Optional[QuestionMetadata]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def for_layer(self, layer: Layer) -> List[QuestionMetadata]:
        return [q for q in self.questions if q.layer == layer]

    def data_point_ids(self) -> List[str]:
        return [q.data_point_id for q in self.questions if q.data_point_id]


def load_question_catalog_data(data: Dict[str, Any]) -> QuestionCatalog:
    """
    Validates the raw dictionary data against the QuestionCatalog model
    and performs additional custom validations.
    """
    # Schema problems surface as pydantic.ValidationError
    catalog = QuestionCatalog.model_validate(data)

    question_ids = set()
    for question in catalog.questions:
        if question.id in question_ids:
            raise CatalogValidationError(f"Duplicate question ID found: {question.id}")
        question_ids.add(question.id)

    data_point_ids = set()
    for data_point_id in catalog.data_point_ids():
        if data_point_id in data_point_ids:
            raise CatalogValidationError(f"Data point '{data_point_id}' is linked to more than one question")
        data_point_ids.add(data_point_id)

    logger.info(f"Loaded question catalog v{catalog.version} with {len(catalog.questions)} questions")
    return catalog


def load_question_catalog_from_file(file_path: str) -> QuestionCatalog:
    """
    Loads a question catalog from a YAML file, validates it,
    and returns a QuestionCatalog object.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise CatalogValidationError(f"YAML file is empty or invalid: {file_path}")

    return load_question_catalog_data(data)
