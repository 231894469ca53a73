# cs_tutor/__init__.py
"""
Gemini client layer for the A-level CS tutor.
"""

from .gemini_client import GeminiClient
from .service import TutoringService
from .models import (
    Attachment, ChatConfig, ChatReply, GroundingSource, QuizQuestion,
    MockExamPaper, MockExamQuestion, MockExamResult, QuestionFeedback, Outcome
)
from .errors import TutorError, TransportError, UpstreamError, ResponseFormatError

__all__ = [
    'GeminiClient',
    'TutoringService',
    'Attachment',
    'ChatConfig',
    'ChatReply',
    'GroundingSource',
    'QuizQuestion',
    'MockExamPaper',
    'MockExamQuestion',
    'MockExamResult',
    'QuestionFeedback',
    'Outcome',
    'TutorError',
    'TransportError',
    'UpstreamError',
    'ResponseFormatError'
]
