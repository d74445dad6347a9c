import logging
import random
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional, Sequence, Union

from .models import Question

logger = logging.getLogger(__name__)


class Presentation(BaseModel):
    """The question currently on screen and where it came from."""
    model_config = ConfigDict(frozen=True)

    question: Question
    category: Optional[str] = None  # None for comprehensive questions

    @property
    def is_comprehensive(self) -> bool:
        return self.category is None


class SessionComplete:
    """Returned by QuestionScheduler.next_question() once every standard pool is empty."""

    def __repr__(self):
        return "SESSION_COMPLETE"


SESSION_COMPLETE = SessionComplete()


class QuestionScheduler:
    """
    Decides which question comes next.

    Standard questions are drawn round-robin over the ordered category list, skipping empty
    pools. Comprehensive (multi-select) questions are interleaved so that one becomes due
    each time another ``interval`` standard answers have been given.
    """

    def __init__(
        self,
        categories: Sequence[str],
        pools: Dict[str, List[Question]],
        threshold: int,
        comprehensive: Sequence[Question] = (),
        interval: int = 10,
        rng: Optional[random.Random] = None,
    ):
        if interval < 1:
            raise ValueError(f"Comprehensive interval must be at least 1, got {interval}")
        self.categories = tuple(categories)
        self.threshold = threshold
        self.interval = interval
        self.rng = rng or random.Random()

        self.pools: Dict[str, List[Question]] = {}
        for category in self.categories:
            pool = list(pools.get(category, []))
            self.rng.shuffle(pool)
            self.pools[category] = pool
        self.answered_counts: Dict[str, int] = {category: 0 for category in self.categories}

        self.comprehensive_pool: List[Question] = list(comprehensive)
        self.rng.shuffle(self.comprehensive_pool)
        self.comprehensive_total = len(self.comprehensive_pool)

        self.pointer = 0

    # --- Counters ---

    @property
    def standard_answered(self) -> int:
        return sum(self.answered_counts.values())

    @property
    def comprehensive_consumed(self) -> int:
        """Comprehensive questions drawn and not returned, the one on screen included."""
        return self.comprehensive_total - len(self.comprehensive_pool)

    def remaining(self, category: str) -> int:
        return len(self.pools.get(category, []))

    def is_exhausted(self) -> bool:
        return all(not pool for pool in self.pools.values())

    def comprehensive_due(self) -> bool:
        """Checked before completion, so a due comprehensive question is still drawn after the standard pools run dry."""
        if not self.comprehensive_pool:
            return False
        return self.standard_answered // self.interval > self.comprehensive_consumed

    # --- Drawing ---

    def next_question(self) -> Union[Presentation, SessionComplete]:
        if self.comprehensive_due():
            question = self.comprehensive_pool.pop()
            logger.debug(f"Drawing comprehensive question #{self.comprehensive_consumed}")
            if self.categories:
                self.pointer = (self.pointer + 1) % len(self.categories)
            return Presentation(question=question, category=None)

        if self.is_exhausted():
            return SESSION_COMPLETE

        count = len(self.categories)
        for offset in range(count):
            index = (self.pointer + offset) % count
            category = self.categories[index]
            if self.pools[category]:
                question = self.pools[category].pop()
                self.pointer = (index + 1) % count
                return Presentation(question=question, category=category)

        return SESSION_COMPLETE

    def return_question(self, presentation: Presentation) -> None:
        """Puts a drawn but unanswered question back on top of its pool."""
        if presentation.is_comprehensive:
            self.comprehensive_pool.append(presentation.question)
        else:
            self.pools[presentation.category].append(presentation.question)

    def restore_rotation(self, category: Optional[str]) -> None:
        """Points the rotation just past ``category``; comprehensive restores leave it alone."""
        if category is None or category not in self.categories:
            return
        self.pointer = (self.categories.index(category) + 1) % len(self.categories)

    # --- Answer bookkeeping ---

    def mark_answered(self, category: Optional[str]) -> None:
        if category is not None:
            self.answered_counts[category] += 1

    def unmark_answered(self, category: Optional[str]) -> None:
        if category is not None:
            self.answered_counts[category] -= 1

    # --- Eligibility ---

    def can_skip(self, presentation: Presentation) -> bool:
        """
        A standard question may be skipped only if the category can still reach the
        threshold without it. Comprehensive questions can always be skipped.
        """
        if presentation.is_comprehensive:
            return True
        category = presentation.category
        return self.answered_counts[category] + 1 + self.remaining(category) > self.threshold

    def can_finish_early(self) -> bool:
        return all(self.answered_counts[category] >= self.threshold for category in self.categories)
