"""
Tutoring service: the non-throwing boundary used by the UI layer.
Maps failed outcomes of the Gemini client onto fixed fallback values.
"""

from typing import Dict, List, Optional, Sequence, Union

from common.constants import (
    LANG_EN, PAPER_THEORY, DEFAULT_ASPECT_RATIO, DEFAULT_IMAGE_SIZE,
    FALLBACK_CHAT_ERROR,
    FALLBACK_GRADE_EMPTY, FALLBACK_GRADE_ERROR,
    FALLBACK_ANALYSIS_EMPTY, FALLBACK_ANALYSIS_ERROR,
    ERROR_PAPER_ID, ERROR_PAPER_TITLE, ERROR_RESULT_GRADE, ERROR_RESULT_FEEDBACK
)
from common.logger import get_logger
from .errors import TutorError
from .gemini_client import GeminiClient
from .models import (
    Attachment, ChatConfig, ChatReply, MockExamPaper, MockExamResult, Outcome, QuizQuestion
)

logger = get_logger(__name__)


def error_paper(paper_type: str) -> MockExamPaper:
    """Placeholder paper returned when generation fails"""
    return MockExamPaper(
        id=ERROR_PAPER_ID,
        type=paper_type,
        title=ERROR_PAPER_TITLE,
        duration_minutes=0,
        questions=[]
    )


def error_result() -> MockExamResult:
    """Zeroed result returned when grading fails"""
    return MockExamResult(
        total_marks=0,
        user_marks=0,
        grade=ERROR_RESULT_GRADE,
        feedback=ERROR_RESULT_FEEDBACK,
        question_feedback=[]
    )


class TutoringService:
    """
    Tutoring operations with a never-raising contract.

    Callers that need to tell failure causes apart should use
    GeminiClient directly; this class only reports the fallback value.
    """

    def __init__(self, client: GeminiClient):
        """
        Initialize tutoring service.

        Args:
            client: Configured Gemini client shared by all operations
        """
        self.client = client

    async def _call(self, operation: str, method, *args, **kwargs) -> Outcome:
        """Run a client operation; any exception becomes a failed Outcome too"""
        try:
            outcome = await method(*args, **kwargs)
        except Exception as e:
            logger.error(f"{operation}: rejected request ({type(e).__name__}): {e}")
            return Outcome.failure(TutorError(str(e)))

        if not outcome.ok:
            logger.error(f"{operation}: returning fallback after {outcome.error.kind} error")
        return outcome

    async def chat_with_gemini(self, history: Sequence[str], message: str,
                               attachments: Sequence[Attachment] = (),
                               persona: str = 'standard', language: str = LANG_EN,
                               config: Optional[ChatConfig] = None) -> ChatReply:
        outcome = await self._call('chat', self.client.chat, history, message,
                                   attachments, persona, language, config)
        if not outcome.ok:
            return ChatReply(text=FALLBACK_CHAT_ERROR)
        return outcome.value

    async def generate_or_edit_image(self, prompt: str, image: Optional[str] = None,
                                     aspect_ratio: str = DEFAULT_ASPECT_RATIO,
                                     size: str = DEFAULT_IMAGE_SIZE,
                                     language: str = LANG_EN) -> Optional[str]:
        outcome = await self._call('image', self.client.generate_or_edit_image,
                                   prompt, image, aspect_ratio, size, language)
        return outcome.value if outcome.ok else None

    async def generate_quiz_questions(self, topics: Sequence[str],
                                      language: str = LANG_EN) -> List[QuizQuestion]:
        outcome = await self._call('quiz', self.client.generate_quiz_questions, topics, language)
        return outcome.value if outcome.ok else []

    async def grade_submission(self, text: str, files: Sequence[Attachment] = (),
                               language: str = LANG_EN) -> str:
        outcome = await self._call('grade', self.client.grade_submission, text, files, language)
        if not outcome.ok:
            return FALLBACK_GRADE_ERROR
        return outcome.value or FALLBACK_GRADE_EMPTY

    async def analyze_code(self, code: str, language: str, user_lang: str = LANG_EN) -> str:
        outcome = await self._call('analyze', self.client.analyze_code, code, language, user_lang)
        if not outcome.ok:
            return FALLBACK_ANALYSIS_ERROR
        return outcome.value or FALLBACK_ANALYSIS_EMPTY

    async def generate_mock_paper(self, paper_type: str, language: str = LANG_EN) -> MockExamPaper:
        outcome = await self._call('mock-paper', self.client.generate_mock_paper,
                                   paper_type, language)
        if outcome.ok:
            return outcome.value
        # error_paper validates the type; fall back to a theory paper for unknown ones
        try:
            return error_paper(paper_type)
        except ValueError:
            return error_paper(PAPER_THEORY)

    async def grade_mock_paper(self, paper: Union[MockExamPaper, Dict], answers: Dict[int, str],
                               language: str = LANG_EN) -> MockExamResult:
        outcome = await self._call('mock-grade', self.client.grade_mock_paper,
                                   paper, answers, language)
        return outcome.value if outcome.ok else error_result()
