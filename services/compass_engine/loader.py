import json
import logging
import yaml
from pathlib import Path
from pydantic import ValidationError
from typing import Dict, Any

from services.compass_engine.models import CompassDataset, DatasetLoadError

logger = logging.getLogger(__name__)


def load_dataset_data(data: Dict[str, Any]) -> CompassDataset:
    """
    Validates the raw dictionary against the CompassDataset model
    and performs the checks pydantic can't express on its own.
    """
    if not isinstance(data, dict):
        raise DatasetLoadError(f"Dataset must be a mapping, got {type(data).__name__}")

    try:
        dataset = CompassDataset.model_validate(data)
    except ValidationError as e:
        raise DatasetLoadError(f"Dataset failed schema validation: {e}") from e

    if not dataset.meta.axes:
        raise DatasetLoadError("Dataset defines no axes")

    categories = dataset.meta.question_logic.categories
    if not categories:
        raise DatasetLoadError("Dataset defines no question categories")

    seen = set()
    for category in categories:
        if category in seen:
            raise DatasetLoadError(f"Duplicate category found: {category}")
        seen.add(category)

    if not dataset.ideologies:
        raise DatasetLoadError("Dataset defines no ideologies")

    # Missing pools degrade to empty ones; stray pools are never scheduled.
    for category in categories:
        if category not in dataset.questions:
            logger.warning(f"Category '{category}' has no questions; treating its pool as empty.")
    for category in dataset.questions:
        if category not in seen:
            logger.warning(f"Questions under unknown category '{category}' will not be scheduled.")

    axis_ids = set(dataset.axis_ids)
    all_questions = [q for pool in dataset.questions.values() for q in pool]
    for question in all_questions + list(dataset.comprehensive_questions):
        for option in question.options:
            unknown = set(option.effects) - axis_ids
            if unknown:
                logger.debug(f"Option '{option.text}' references unknown axes {sorted(unknown)}; they will be ignored.")

    logger.info(
        f"Loaded dataset: {len(axis_ids)} axes, {len(categories)} categories, "
        f"{dataset.total_standard_questions()} questions, "
        f"{len(dataset.comprehensive_questions)} comprehensive questions, "
        f"{len(dataset.ideologies)} ideologies"
    )
    return dataset


def load_dataset_from_file(file_path: str) -> CompassDataset:
    """
    Loads a dataset from a JSON or YAML file, validates it,
    and returns a CompassDataset.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix not in ('.json', '.yml', '.yaml'):
        raise DatasetLoadError(f"Unsupported dataset file type '{suffix}': {file_path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except FileNotFoundError:
        raise DatasetLoadError(f"File not found: {file_path}")
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Error parsing JSON file {file_path}: {e}")
    except yaml.YAMLError as e:
        raise DatasetLoadError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise DatasetLoadError(f"Dataset file is empty or invalid: {file_path}")

    return load_dataset_data(data)
