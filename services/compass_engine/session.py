import logging
import random
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .core.config import CompassSettings, get_settings
from .history import Action, AnswerHistory
from .ledger import ScoreLedger, sum_effects
from .loader import load_dataset_from_file
from .matcher import Match, MatchEngine
from .models import (
    CompassDataset,
    InvalidAnswerError,
    Option,
    SessionStateError,
    SkipNotAllowedError,
)
from .scheduler import SESSION_COMPLETE, Presentation, QuestionScheduler

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class CompassSession:
    """
    One respondent's pass through the questionnaire.

    Owns the ledger, the answer history and the scheduler, plus the single ``current``
    presentation. ``current`` only changes when the scheduler draws a question or when
    undo restores one. Undo is unavailable once the session is complete.
    """

    def __init__(
        self,
        dataset: CompassDataset,
        settings: Optional[CompassSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.dataset = dataset
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.matcher = MatchEngine(
            dataset.ideologies,
            veto_threshold=self.settings.centrist_veto_threshold,
            penalty=self.settings.centrist_penalty,
            centrist_markers=self.settings.centrist_markers,
        )
        self._clear()

    def _clear(self) -> None:
        self.state = SessionState.NOT_STARTED
        self.ledger = ScoreLedger(self.dataset.axis_ids)
        self.history = AnswerHistory()
        self.scheduler: Optional[QuestionScheduler] = None
        self.current: Optional[Presentation] = None
        self.skipped_total = 0

    def _log_context(self, category: Optional[str] = None) -> Dict[str, object]:
        return {
            "session_state": self.state.value,
            "answered_total": self.answered_total,
            "skipped_total": self.skipped_total,
            "category": category,
        }

    @property
    def comprehensive_interval(self) -> int:
        return self.dataset.meta.question_logic.comprehensive_interval or self.settings.comprehensive_interval

    # --- Lifecycle ---

    def start(self) -> Optional[Presentation]:
        """(Re)initialises every piece of session state and presents the first question."""
        self._clear()
        self.scheduler = QuestionScheduler(
            categories=self.dataset.categories,
            pools={cat: self.dataset.category_pool(cat) for cat in self.dataset.categories},
            threshold=self.dataset.skip_threshold,
            comprehensive=self.dataset.comprehensive_questions,
            interval=self.comprehensive_interval,
            rng=self.rng,
        )
        self.state = SessionState.IN_PROGRESS
        logger.info(
            f"Session started: {self.total_questions} questions across "
            f"{len(self.dataset.categories)} categories",
            extra=self._log_context(),
        )
        self._advance()
        return self.current

    def reset(self) -> None:
        self._clear()
        logger.info("Session reset.", extra=self._log_context())

    def _advance(self) -> None:
        drawn = self.scheduler.next_question()
        if drawn is SESSION_COMPLETE:
            self._complete()
        else:
            self.current = drawn

    def _complete(self) -> None:
        self.current = None
        self.state = SessionState.COMPLETE
        best = self.best_match()
        logger.info(
            f"Session complete after {self.answered_total} answers "
            f"({self.skipped_total} skipped); best match: {best.archetype.name if best else None}",
            extra=self._log_context(),
        )

    def _require_in_progress(self) -> Presentation:
        if self.state is not SessionState.IN_PROGRESS or self.current is None:
            raise SessionStateError(f"No question is being presented (session is {self.state.value})")
        return self.current

    # --- Responses ---

    def _option(self, index: int) -> Option:
        options = self.current.question.options
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(options):
            raise InvalidAnswerError(f"Option index {index!r} out of range for a question with {len(options)} options")
        return options[index]

    def answer(self, option_index: int) -> Optional[Presentation]:
        """Applies a single chosen option and presents the next question."""
        presentation = self._require_in_progress()
        if presentation.is_comprehensive:
            return self.answer_many([option_index])
        option = self._option(option_index)
        self._record(dict(option.effects), multi_select=False)
        return self.current

    def answer_many(self, option_indices: Iterable[int]) -> Optional[Presentation]:
        """Sums the effects of every selected option and applies them as one answer."""
        presentation = self._require_in_progress()
        if not presentation.is_comprehensive:
            raise InvalidAnswerError("Multiple selections are only accepted for comprehensive questions")
        indices = list(dict.fromkeys(option_indices))
        if not indices:
            raise InvalidAnswerError("Select at least one option, or skip the question")
        options = [self._option(index) for index in indices]
        self._record(sum_effects(option.effects for option in options), multi_select=True)
        return self.current

    def _record(self, effects: Dict[str, float], multi_select: bool) -> None:
        presentation = self.current
        self.ledger.apply(effects)
        self.scheduler.mark_answered(presentation.category)
        self.history.push(Action(
            question=presentation.question,
            category=presentation.category,
            effects=effects,
            multi_select=multi_select,
        ))
        logger.debug(f"Answered: {effects}", extra=self._log_context(presentation.category))
        self._advance()

    def skip(self) -> Optional[Presentation]:
        presentation = self._require_in_progress()
        if not self.scheduler.can_skip(presentation):
            raise SkipNotAllowedError(
                f"Skipping would leave category '{presentation.category}' below "
                f"{self.scheduler.threshold} answers"
            )
        self.history.push(Action(
            question=presentation.question,
            category=presentation.category,
            effects=None,
            multi_select=presentation.is_comprehensive,
        ))
        self.skipped_total += 1
        logger.debug("Skipped question", extra=self._log_context(presentation.category))
        self._advance()
        return self.current

    def undo(self) -> Optional[Action]:
        """
        Rolls back the most recent answer or skip and re-presents its question.

        The question on screen goes back on top of its pool. Returns the restored action,
        or None when there is nothing to undo.
        """
        if not self.can_undo():
            logger.debug("Undo requested with nothing to undo.", extra=self._log_context())
            return None

        action = self.history.pop()
        if action.is_skip:
            self.skipped_total -= 1
        else:
            self.ledger.revert(action.effects)
            self.scheduler.unmark_answered(action.category)

        if self.current is not None:
            self.scheduler.return_question(self.current)
        self.current = Presentation(question=action.question, category=action.category)
        self.scheduler.restore_rotation(action.category)
        logger.debug(
            f"Undid {'skip' if action.is_skip else 'answer'}",
            extra=self._log_context(action.category),
        )
        return action

    def finish_early(self) -> None:
        if self.state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"Cannot finish a session that is {self.state.value}")
        if not self.can_finish_early():
            raise SessionStateError(
                f"Every category needs at least {self.scheduler.threshold} answers before finishing early"
            )
        if self.current is not None:
            self.scheduler.return_question(self.current)
        self._complete()

    # --- Queries ---

    def can_undo(self) -> bool:
        return self.state is SessionState.IN_PROGRESS and self.history.can_undo()

    def can_skip(self) -> bool:
        if self.state is not SessionState.IN_PROGRESS or self.current is None:
            return False
        return self.scheduler.can_skip(self.current)

    def can_finish_early(self) -> bool:
        return self.state is SessionState.IN_PROGRESS and self.scheduler.can_finish_early()

    @property
    def answered_counts(self) -> Dict[str, int]:
        if self.scheduler is None:
            return {category: 0 for category in self.dataset.categories}
        return dict(self.scheduler.answered_counts)

    @property
    def answered_total(self) -> int:
        return sum(self.answered_counts.values())

    @property
    def total_questions(self) -> int:
        return self.dataset.total_standard_questions()

    def preview_ready(self) -> bool:
        """The live best-match preview shows once every category has at least one answer."""
        counts = self.answered_counts
        return bool(counts) and all(count > 0 for count in counts.values())

    def profile(self) -> Dict[str, float]:
        return self.ledger.normalize()

    def rank(self) -> List[Match]:
        return self.matcher.rank(self.profile())

    def best_match(self) -> Optional[Match]:
        return self.matcher.best(self.profile())


def create_session(settings: Optional[CompassSettings] = None, rng: Optional[random.Random] = None) -> CompassSession:
    """Loads the configured dataset and builds a fresh, not yet started session."""
    settings = settings or get_settings()
    dataset = load_dataset_from_file(settings.dataset_path)
    return CompassSession(dataset, settings=settings, rng=rng)


# Example Usage (for testing purposes)
if __name__ == "__main__":
    import json
    from .core.logging_config import setup_logging
    from .presentation import results_view

    settings = get_settings()
    setup_logging(settings.log_level)
    session = create_session(settings, rng=random.Random(7))
    session.start()

    # Simulate a respondent who always picks the first option
    while session.state is SessionState.IN_PROGRESS:
        session.answer(0)

    print(json.dumps(results_view(session), indent=2, ensure_ascii=False))
