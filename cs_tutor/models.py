"""
Value records exchanged with callers of the tutoring client.

Records are created fresh per call and handed over to the caller. Parsed
records (quiz questions, mock papers, grading results) are pydantic models:
they double as the response schema sent to Gemini, are validated from the
JSON the model returns and serialize back with ``to_dict`` using the same
camelCase keys.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator

from common.constants import (
    ASPECT_RATIOS, IMAGE_SIZES, PAPER_TYPES, MOCK_PAPER_DURATION_MINUTES
)
from .errors import TutorError


@dataclass(frozen=True)
class Attachment:
    """A file sent inline with a request"""
    mime_type: str
    data: str  # base64 text


@dataclass(frozen=True)
class ChatConfig:
    """Chat options; thinking wins over search when both are set"""
    use_search: bool = False
    use_thinking: bool = False


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class InlineDataPart:
    mime_type: str
    data: str  # base64 text

    @classmethod
    def from_attachment(cls, attachment: Attachment) -> 'InlineDataPart':
        return cls(mime_type=attachment.mime_type, data=attachment.data)


ContentPart = Union[TextPart, InlineDataPart]


@dataclass(frozen=True)
class RequestOptions:
    """
    Per-request generation options.

    Only combinations the tutoring operations actually use are accepted:
    a thinking budget excludes the search tool, and a JSON response schema
    excludes image options.
    """
    system_instruction: Optional[str] = None
    thinking_budget: Optional[int] = None
    use_search: bool = False
    response_schema: Optional[Any] = None
    aspect_ratio: Optional[str] = None
    image_size: Optional[str] = None

    def __post_init__(self):
        if self.thinking_budget is not None:
            if self.thinking_budget <= 0:
                raise ValueError("thinking_budget must be positive")
            if self.use_search:
                raise ValueError("thinking and search cannot be combined")
        if self.response_schema is not None and self.has_image_options:
            raise ValueError("a response schema cannot be combined with image options")
        if self.aspect_ratio is not None and self.aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {self.aspect_ratio}")
        if self.image_size is not None and self.image_size not in IMAGE_SIZES:
            raise ValueError(f"Unsupported image size: {self.image_size}")

    @property
    def has_image_options(self) -> bool:
        return self.aspect_ratio is not None or self.image_size is not None


@dataclass(frozen=True)
class GroundingSource:
    """A web citation attached to a search-grounded answer"""
    title: str
    uri: str

    def to_dict(self) -> Dict:
        return {'title': self.title, 'uri': self.uri}


@dataclass
class ChatReply:
    text: str
    grounding_sources: Optional[List[GroundingSource]] = None

    def to_dict(self) -> Dict:
        data = {'text': self.text}
        if self.grounding_sources is not None:
            data['groundingSources'] = [s.to_dict() for s in self.grounding_sources]
        return data


class WireModel(BaseModel):
    """Base for records whose wire form uses camelCase keys"""
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict:
        return self.model_dump(by_alias=True)


class QuizQuestion(WireModel):
    model_config = ConfigDict(frozen=True)

    question: StrictStr
    options: List[StrictStr]
    correct_index: StrictInt = Field(alias='correctIndex')
    explanation: StrictStr

    @model_validator(mode='after')
    def check_correct_index(self) -> 'QuizQuestion':
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(f"correctIndex {self.correct_index} out of range "
                             f"for {len(self.options)} options")
        return self


class MockExamQuestion(WireModel):
    model_config = ConfigDict(frozen=True)

    id: StrictInt
    question: StrictStr
    marks: StrictInt


class MockPaperBody(WireModel):
    """The part of a mock paper written by the model"""
    title: StrictStr
    questions: List[MockExamQuestion]


class MockExamPaper(WireModel):
    id: StrictStr
    type: StrictStr
    title: StrictStr
    duration_minutes: StrictInt = Field(default=MOCK_PAPER_DURATION_MINUTES, alias='durationMinutes')
    questions: List[MockExamQuestion] = Field(default_factory=list)

    @field_validator('type')
    @classmethod
    def check_type(cls, value: str) -> str:
        if value not in PAPER_TYPES:
            raise ValueError(f"Unknown paper type: {value}")
        return value

    @property
    def total_marks(self) -> int:
        return sum(q.marks for q in self.questions)


class QuestionFeedback(WireModel):
    model_config = ConfigDict(frozen=True)

    id: StrictInt
    feedback: StrictStr
    marks_awarded: StrictInt = Field(alias='marksAwarded')


class MockExamResult(WireModel):
    total_marks: StrictInt = Field(alias='totalMarks')
    user_marks: StrictInt = Field(alias='userMarks')
    grade: StrictStr
    feedback: StrictStr
    question_feedback: List[QuestionFeedback] = Field(alias='questionFeedback')


@dataclass(frozen=True)
class Outcome:
    """Either a successful value or the error that prevented one"""
    value: Any = None
    error: Optional[TutorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> 'Outcome':
        return cls(value=value)

    @classmethod
    def failure(cls, error: TutorError) -> 'Outcome':
        return cls(error=error)
