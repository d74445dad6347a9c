from pydantic import BaseModel, Field, AliasChoices, ConfigDict, field_validator
from typing import List, Dict, Optional, Tuple


class Axis(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    left: str = Field(..., validation_alias=AliasChoices('left', 'leftLabel', 'left_label'))
    right: str = Field(..., validation_alias=AliasChoices('right', 'rightLabel', 'right_label'))


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    effects: Dict[str, float] = Field(default_factory=dict)


class Question(BaseModel):
    # Identity matters for pool bookkeeping, so questions compare by object, not by value.
    model_config = ConfigDict(frozen=True)

    text: str
    options: List[Option]

    @field_validator('options')
    @classmethod
    def _has_options(cls, value: List[Option]) -> List[Option]:
        if not value:
            raise ValueError("question must have at least one option")
        return value

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return id(self)


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    origin: str = Field(..., validation_alias=AliasChoices('origin', 'text'))
    trans: Optional[str] = None
    source: Optional[str] = Field(None, validation_alias=AliasChoices('source', 'author'))


class Archetype(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    icon: Optional[str] = None
    stats: Dict[str, float]
    desc: str = ""
    figures: List[str] = Field(default_factory=list)
    quote: Optional[Quote] = None
    books: List[str] = Field(default_factory=list)

    @field_validator('figures', mode='before')
    @classmethod
    def _figures_as_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator('quote', mode='before')
    @classmethod
    def _quote_from_string(cls, value):
        if isinstance(value, str):
            return {'origin': value}
        return value

    @field_validator('books', mode='before')
    @classmethod
    def _books_as_list(cls, value):
        return value or []

    @property
    def display_name(self) -> str:
        """Name without the parenthesised suffix, e.g. 'Liberalism (自由主义)' -> 'Liberalism'."""
        return self.name.split(' (')[0]


class QuestionLogic(BaseModel):
    categories: List[str]
    questions_per_category_before_skip: int = Field(0, ge=0)
    comprehensive_interval: Optional[int] = Field(None, ge=1)


class Meta(BaseModel):
    axes: Dict[str, Axis]
    question_logic: QuestionLogic
    category_labels: Dict[str, str] = Field(default_factory=dict)


class CompassDataset(BaseModel):
    """Read-only questionnaire content: axes, question pools and the archetype catalog."""
    model_config = ConfigDict(frozen=True)

    meta: Meta
    questions: Dict[str, List[Question]] = Field(default_factory=dict)
    comprehensive_questions: List[Question] = Field(default_factory=list)
    ideologies: List[Archetype]

    @property
    def axis_ids(self) -> Tuple[str, ...]:
        return tuple(self.meta.axes.keys())

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self.meta.question_logic.categories)

    @property
    def skip_threshold(self) -> int:
        return self.meta.question_logic.questions_per_category_before_skip

    def category_pool(self, category: str) -> List[Question]:
        return list(self.questions.get(category, []))

    def category_label(self, category: str) -> str:
        return self.meta.category_labels.get(category, category)

    def total_standard_questions(self) -> int:
        return sum(len(self.questions.get(cat, [])) for cat in self.categories)



# Custom Error Classes
class DatasetLoadError(ValueError):
    """Raised when the dataset is missing or malformed; no session can be built from it."""
    pass

class SessionStateError(ValueError):
    """Raised when an operation is not valid in the session's current state."""
    pass

class SkipNotAllowedError(SessionStateError):
    """Raised when skipping would leave a category below its minimum answered count."""
    pass

class InvalidAnswerError(ValueError):
    """Raised for out-of-range option indices or an unusable multi-select."""
    pass
