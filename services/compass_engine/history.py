import logging
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional

from .models import Question

logger = logging.getLogger(__name__)


class Action(BaseModel):
    """
    One reversible step of a session: an answer or a skip.

    ``effects`` is the effect map that was applied to the ledger, or None for a skip.
    ``category`` is None for comprehensive questions, which live outside the category rotation.
    """
    model_config = ConfigDict(frozen=True)

    question: Question
    category: Optional[str] = None
    effects: Optional[Dict[str, float]] = None
    multi_select: bool = False

    @property
    def is_skip(self) -> bool:
        return self.effects is None

    @property
    def is_comprehensive(self) -> bool:
        return self.category is None


class AnswerHistory:
    """Strict LIFO log of applied actions."""

    def __init__(self):
        self._actions: List[Action] = []

    def push(self, action: Action) -> None:
        self._actions.append(action)

    def pop(self) -> Optional[Action]:
        """Returns the most recent action, or None when there is nothing to undo."""
        if not self._actions:
            logger.debug("Nothing to undo.")
            return None
        return self._actions.pop()

    def can_undo(self) -> bool:
        return bool(self._actions)

    def clear(self) -> None:
        self._actions.clear()

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self):
        return iter(list(self._actions))
