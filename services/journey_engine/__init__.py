# Journey scoring and progression engine

from .models import (
    Answer, ConversionType, Layer, PersuasionBand, PoliticalLens, ResultCategory,
    ScoreVector, SessionState, JourneyError, InvalidResponseError, SessionNotFoundError, StorageError
)
from .classifier import classify, coarse_score
from .loader import CatalogValidationError, QuestionCatalog, load_question_catalog_from_file
from .narrative import generate_narrative, generate_share_message
from .prioritizer import prioritize_actions
from .scorer import compute_scores
from .session import JourneySession
from .store import SessionStore

__all__ = [
    "Answer",
    "ConversionType",
    "Layer",
    "PersuasionBand",
    "PoliticalLens",
    "ResultCategory",
    "ScoreVector",
    "SessionState",
    "JourneyError",
    "InvalidResponseError",
    "SessionNotFoundError",
    "StorageError",
    "classify",
    "coarse_score",
    "CatalogValidationError",
    "QuestionCatalog",
    "load_question_catalog_from_file",
    "generate_narrative",
    "generate_share_message",
    "prioritize_actions",
    "compute_scores",
    "JourneySession",
    "SessionStore",
]
