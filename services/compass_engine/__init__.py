from .loader import load_dataset_data, load_dataset_from_file
from .matcher import Match, MatchEngine, match_percentage
from .models import (
    CompassDataset,
    DatasetLoadError,
    InvalidAnswerError,
    SessionStateError,
    SkipNotAllowedError,
)
from .session import CompassSession, SessionState, create_session

__all__ = [
    "CompassDataset",
    "CompassSession",
    "DatasetLoadError",
    "InvalidAnswerError",
    "Match",
    "MatchEngine",
    "SessionState",
    "SessionStateError",
    "SkipNotAllowedError",
    "create_session",
    "load_dataset_data",
    "load_dataset_from_file",
    "match_percentage",
]
