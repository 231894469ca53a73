"""
Gemini client for the A-level CS tutor.
Builds requests for the Google Gen AI SDK and shapes the responses into
tutoring records. Every operation issues exactly one request and returns
an Outcome instead of raising.
"""

from functools import wraps
from typing import Dict, List, Optional, Sequence, Union

from google import genai
from google.genai import errors, types
from pydantic import ValidationError

from common.constants import (
    DEFAULT_MODELS, THINKING_BUDGET, PAPER_TYPES, MOCK_PAPER_DURATION_MINUTES,
    DEFAULT_ASPECT_RATIO, DEFAULT_IMAGE_SIZE, EDIT_SOURCE_MIME_TYPE, LANG_EN,
    FALLBACK_CHAT_EMPTY
)
from common.logger import get_logger
from common.utils import decode_base64, encode_base64, generate_paper_id, parse_json_text
from .errors import TutorError, TransportError, UpstreamError, ResponseFormatError
from .models import (
    Attachment, ChatConfig, ChatReply, ContentPart, GroundingSource, InlineDataPart,
    MockExamPaper, MockExamResult, MockPaperBody, Outcome, QuizQuestion,
    RequestOptions, TextPart
)
from .prompts import (
    get_persona_prompt, get_core_prompt, build_history_block, build_quiz_prompt,
    build_grading_prompt, build_code_analysis_prompt, build_mock_paper_prompt,
    build_mock_grading_prompt
)

logger = get_logger(__name__)


def returns_outcome(operation: str):
    """Decorator turning a tutoring coroutine into one that returns an Outcome"""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                value = await func(self, *args, **kwargs)
            except TutorError as e:
                logger.error(f"{operation} failed ({e.kind}): {e}")
                return Outcome.failure(e)
            return Outcome.success(value)
        return wrapper
    return decorator


def to_sdk_part(part: ContentPart) -> types.Part:
    """Convert a tagged content part into the SDK representation"""
    if isinstance(part, TextPart):
        return types.Part(text=part.text)
    if isinstance(part, InlineDataPart):
        return types.Part(inline_data=types.Blob(
            mime_type=part.mime_type,
            data=decode_base64(part.data)
        ))
    raise TypeError(f"Unsupported content part: {part!r}")


def to_sdk_config(options: RequestOptions) -> types.GenerateContentConfig:
    """Translate validated request options into a GenerateContentConfig"""
    kwargs = {}
    if options.system_instruction:
        kwargs['system_instruction'] = options.system_instruction
    if options.thinking_budget is not None:
        kwargs['thinking_config'] = types.ThinkingConfig(thinking_budget=options.thinking_budget)
    if options.use_search:
        kwargs['tools'] = [types.Tool(google_search=types.GoogleSearch())]
    if options.response_schema is not None:
        kwargs['response_mime_type'] = 'application/json'
        kwargs['response_schema'] = options.response_schema
    if options.has_image_options:
        kwargs['image_config'] = types.ImageConfig(
            aspect_ratio=options.aspect_ratio,
            image_size=options.image_size
        )
    return types.GenerateContentConfig(**kwargs)


def response_text(response) -> str:
    """Text of the first candidate, '' when there is none"""
    return response.text or ""


def extract_grounding_sources(response) -> List[GroundingSource]:
    """Collect the web citations attached to the first candidate"""
    sources = []
    candidates = response.candidates or []
    if not candidates or not candidates[0].grounding_metadata:
        return sources

    for chunk in candidates[0].grounding_metadata.grounding_chunks or []:
        if chunk.web:
            sources.append(GroundingSource(title=chunk.web.title or "", uri=chunk.web.uri or ""))
    return sources


def extract_inline_data(response) -> Optional[str]:
    """Base64 text of the first inline-data part, or None"""
    candidates = response.candidates or []
    if not candidates or not candidates[0].content:
        return None

    for part in candidates[0].content.parts or []:
        if part.inline_data and part.inline_data.data:
            return encode_base64(part.inline_data.data)
    return None


def parse_json_response(response):
    try:
        return parse_json_text(response.text)
    except ValueError as e:
        raise ResponseFormatError(f"Response is not valid JSON: {e}") from e


class GeminiClient:
    """
    Client for the tutoring operations on top of the Gemini API.

    The underlying SDK client is created once and shared read-only by all
    calls; pass ``client`` to substitute a test double.
    """

    def __init__(self, api_key: Optional[str] = None,
                 models: Optional[Dict[str, str]] = None,
                 thinking_budget: int = THINKING_BUDGET,
                 client=None):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key, required unless client is given
            models: Overrides for the model identifiers, keyed like DEFAULT_MODELS
            thinking_budget: Reasoning budget used by thinking-mode chat
            client: Pre-built genai.Client (or compatible double)
        """
        if client is None:
            if not api_key:
                raise ValueError("Missing Gemini API key. Set GEMINI_API_KEY or pass api_key.")
            client = genai.Client(api_key=api_key)

        unknown = set(models or {}) - set(DEFAULT_MODELS)
        if unknown:
            raise ValueError(f"Unknown model roles: {sorted(unknown)}")

        self.client = client
        self.models = {**DEFAULT_MODELS, **(models or {})}
        self.thinking_budget = thinking_budget

        logger.info(f"Gemini client ready (chat model {self.models['chat_default']})")

    @classmethod
    def from_config(cls, config: Dict) -> 'GeminiClient':
        """Create a client from the 'gemini' section of the configuration"""
        gemini_config = config.get('gemini', {})
        return cls(
            api_key=gemini_config.get('api_key'),
            models=gemini_config.get('models'),
            thinking_budget=gemini_config.get('thinking_budget', THINKING_BUDGET)
        )

    @property
    def live(self):
        """Handle to the realtime (live audio) API of the SDK"""
        return self.client.aio.live

    @property
    def live_model(self) -> str:
        return self.models['live']

    async def _generate(self, model: str, contents, options: Optional[RequestOptions] = None):
        """Issue a single generate_content request, mapping SDK failures to TutorErrors"""
        config = to_sdk_config(options) if options is not None else None
        logger.debug(f"Sending request to {model}")

        try:
            return await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config
            )
        except errors.APIError as e:
            raise UpstreamError(f"Gemini API error {e.code}: {e.message}", status_code=e.code) from e
        except Exception as e:
            raise TransportError(f"Gemini request failed: {e}") from e

    def select_chat_model(self, config: ChatConfig, system_instruction: str):
        """
        Pick the model and options for a chat turn.

        Thinking takes priority over search when both are requested.

        Returns:
            (model identifier, RequestOptions)
        """
        if config.use_thinking:
            return self.models['thinking'], RequestOptions(
                system_instruction=system_instruction,
                thinking_budget=self.thinking_budget
            )
        if config.use_search:
            return self.models['fast'], RequestOptions(
                system_instruction=system_instruction,
                use_search=True
            )
        return self.models['chat_default'], RequestOptions(system_instruction=system_instruction)

    @staticmethod
    def build_chat_parts(history: Sequence[str], message: str,
                         attachments: Sequence[Attachment]) -> List[ContentPart]:
        """History block (if any), then attachments, then the message"""
        parts: List[ContentPart] = []
        history_block = build_history_block(list(history))
        if history_block:
            parts.append(TextPart(history_block))
        parts.extend(InlineDataPart.from_attachment(att) for att in attachments)
        parts.append(TextPart(message))
        return parts

    @returns_outcome("Chat")
    async def chat(self, history: Sequence[str], message: str,
                   attachments: Sequence[Attachment] = (),
                   persona: str = 'standard', language: str = LANG_EN,
                   config: Optional[ChatConfig] = None) -> ChatReply:
        """
        Send one chat turn.

        Args:
            history: Earlier turns as plain text lines
            message: The student's message
            attachments: Files sent inline with the message
            persona: Tutoring persona
            language: 'en' or 'zh'
            config: Search / thinking toggles

        Returns:
            Outcome wrapping a ChatReply
        """
        config = config or ChatConfig()
        model, options = self.select_chat_model(config, get_persona_prompt(persona, language))
        parts = self.build_chat_parts(history, message, attachments)
        contents = types.Content(role='user', parts=[to_sdk_part(p) for p in parts])

        response = await self._generate(model, contents, options)

        return ChatReply(
            text=response_text(response) or FALLBACK_CHAT_EMPTY,
            grounding_sources=extract_grounding_sources(response)
        )

    @returns_outcome("Image generation")
    async def generate_or_edit_image(self, prompt: str, image: Optional[str] = None,
                                     aspect_ratio: str = DEFAULT_ASPECT_RATIO,
                                     size: str = DEFAULT_IMAGE_SIZE,
                                     language: str = LANG_EN) -> Optional[str]:
        """
        Edit ``image`` according to ``prompt``, or generate a new image.

        Returns:
            Outcome wrapping base64 image data, or None when the model
            returned no image
        """
        if image:
            parts = [InlineDataPart(EDIT_SOURCE_MIME_TYPE, image), TextPart(prompt)]
            contents = types.Content(role='user', parts=[to_sdk_part(p) for p in parts])
            response = await self._generate(self.models['image_edit'], contents)
        else:
            options = RequestOptions(aspect_ratio=aspect_ratio, image_size=size)
            contents = types.Content(role='user', parts=[to_sdk_part(TextPart(prompt))])
            response = await self._generate(self.models['image_gen'], contents, options)

        data = extract_inline_data(response)
        if data is None:
            logger.info("Image response contained no inline data")
        return data

    @returns_outcome("Quiz generation")
    async def generate_quiz_questions(self, topics: Sequence[str],
                                      language: str = LANG_EN) -> List[QuizQuestion]:
        """Generate multiple-choice questions; malformed entries are dropped"""
        prompt = build_quiz_prompt(list(topics), language)
        response = await self._generate(
            self.models['fast'], prompt, RequestOptions(response_schema=list[QuizQuestion])
        )

        data = parse_json_response(response)
        if not isinstance(data, list):
            raise ResponseFormatError("Expected a JSON array of questions")

        questions = []
        for item in data:
            try:
                questions.append(QuizQuestion.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping malformed quiz question: {e}")
        return questions

    @returns_outcome("Grading")
    async def grade_submission(self, text: str, files: Sequence[Attachment] = (),
                               language: str = LANG_EN) -> str:
        """Grade a written submission with optional attached files"""
        parts: List[ContentPart] = [InlineDataPart.from_attachment(f) for f in files]
        parts.append(TextPart(build_grading_prompt(text)))
        contents = types.Content(role='user', parts=[to_sdk_part(p) for p in parts])

        response = await self._generate(
            self.models['chat_default'], contents,
            RequestOptions(system_instruction=get_core_prompt(language))
        )
        return response_text(response)

    @returns_outcome("Code analysis")
    async def analyze_code(self, code: str, language: str, user_lang: str = LANG_EN) -> str:
        """
        Analyze code for logic and Big O.

        Args:
            code: Source code or pseudocode
            language: Programming language of the code
            user_lang: Language of the explanation
        """
        response = await self._generate(
            self.models['chat_default'],
            build_code_analysis_prompt(code, language),
            RequestOptions(system_instruction=get_core_prompt(user_lang))
        )
        return response_text(response)

    @returns_outcome("Mock paper generation")
    async def generate_mock_paper(self, paper_type: str, language: str = LANG_EN) -> MockExamPaper:
        """Generate a short mock exam paper of the given type"""
        if paper_type not in PAPER_TYPES:
            raise ValueError(f"Unknown paper type: {paper_type}")

        response = await self._generate(
            self.models['chat_default'],
            build_mock_paper_prompt(paper_type, language),
            RequestOptions(response_schema=MockPaperBody)
        )

        try:
            body = MockPaperBody.model_validate(parse_json_response(response))
        except ValidationError as e:
            raise ResponseFormatError(f"Malformed mock paper: {e}") from e

        return MockExamPaper(
            id=generate_paper_id(),
            type=paper_type,
            title=body.title,
            duration_minutes=MOCK_PAPER_DURATION_MINUTES,
            questions=body.questions
        )

    @returns_outcome("Mock paper grading")
    async def grade_mock_paper(self, paper: Union[MockExamPaper, Dict], answers: Dict[int, str],
                               language: str = LANG_EN) -> MockExamResult:
        """
        Grade the student's answers to a mock paper.

        Args:
            paper: The paper, either as a record or in its camelCase dict form
            answers: Answer text keyed by question id
            language: Language of the feedback
        """
        paper = MockExamPaper.model_validate(paper)
        response = await self._generate(
            self.models['chat_default'],
            build_mock_grading_prompt(paper.to_dict(), answers, language),
            RequestOptions(response_schema=MockExamResult)
        )

        try:
            return MockExamResult.model_validate(parse_json_response(response))
        except ValidationError as e:
            raise ResponseFormatError(f"Malformed grading result: {e}") from e
