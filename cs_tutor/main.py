"""
Main entry point for the A-level CS tutor command line.
Builds the Gemini client once and runs a single tutoring operation.
"""

import sys
import argparse
import asyncio
import json
from typing import Dict, List

from common.constants import (
    PERSONAS, LANGUAGES, LANG_EN, PAPER_TYPES, ASPECT_RATIOS, IMAGE_SIZES,
    DEFAULT_ASPECT_RATIO, DEFAULT_IMAGE_SIZE, ERROR_PAPER_ID
)
from common.logger import setup_logging, get_logger
from common.utils import (
    load_config, guess_mime_type, read_file_base64, read_text_file,
    decode_base64, save_file, get_file_extension
)
from cs_tutor.gemini_client import GeminiClient
from cs_tutor.models import Attachment, ChatConfig
from cs_tutor.service import TutoringService


CODE_LANGUAGES = {
    '.py': 'Python',
    '.java': 'Java',
    '.vb': 'Visual Basic',
    '.pseudo': 'pseudocode',
    '.pse': 'pseudocode',
}


class TutorApp:
    """Composition root: configuration, logging and the shared client"""

    def __init__(self, config: Dict):
        """
        Initialize the tutor application.

        Args:
            config: Configuration dictionary (see common.utils.load_config)
        """
        self.config = config

        setup_logging(self.config['logging'])
        self.logger = get_logger(__name__)

        self.client = GeminiClient.from_config(self.config)
        self.service = TutoringService(self.client)

    async def run(self, args) -> int:
        """Dispatch one command; returns the process exit code"""
        handler = getattr(self, f"_cmd_{args.command.replace('-', '_')}")
        self.logger.info(f"Running command {args.command}")
        return await handler(args)

    async def _cmd_chat(self, args) -> int:
        reply = await self.service.chat_with_gemini(
            history=[],
            message=args.message,
            attachments=load_attachments(args.attach),
            persona=args.persona,
            language=args.lang,
            config=ChatConfig(use_search=args.search, use_thinking=args.thinking)
        )
        print(reply.text)
        for source in reply.grounding_sources or []:
            print(f"  - {source.title}: {source.uri}")
        return 0

    async def _cmd_quiz(self, args) -> int:
        questions = await self.service.generate_quiz_questions(args.topics, args.lang)
        print_json([q.to_dict() for q in questions])
        return 0 if questions else 1

    async def _cmd_mock_paper(self, args) -> int:
        paper = await self.service.generate_mock_paper(args.type, args.lang)
        if paper.id == ERROR_PAPER_ID:
            print("Could not generate a mock paper.", file=sys.stderr)
            return 1

        if not args.take:
            print_json(paper.to_dict())
            return 0

        print(f"{paper.title} ({paper.duration_minutes} minutes)\n")
        answers = {}
        for question in paper.questions:
            print(f"Q{question.id} [{question.marks} marks] {question.question}")
            answers[question.id] = input("> ")

        result = await self.service.grade_mock_paper(paper, answers, args.lang)
        print_json(result.to_dict())
        return 0

    async def _cmd_analyze(self, args) -> int:
        code_language = args.code_lang or CODE_LANGUAGES.get(get_file_extension(args.file), 'Python')
        analysis = await self.service.analyze_code(read_text_file(args.file), code_language, args.lang)
        print(analysis)
        return 0

    async def _cmd_grade(self, args) -> int:
        feedback = await self.service.grade_submission(
            args.text, load_attachments(args.files), args.lang
        )
        print(feedback)
        return 0

    async def _cmd_image(self, args) -> int:
        source = read_file_base64(args.edit) if args.edit else None
        data = await self.service.generate_or_edit_image(
            args.prompt, source, args.aspect_ratio, args.size, args.lang
        )
        if data is None:
            print("No image was returned.", file=sys.stderr)
            return 1

        save_file(decode_base64(data), args.out)
        print(f"Saved image to {args.out}")
        return 0


def load_attachments(paths: List[str]) -> List[Attachment]:
    """Read files from disk as inline attachments"""
    return [
        Attachment(mime_type=guess_mime_type(path), data=read_file_base64(path))
        for path in paths or []
    ]


def print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='A-level CS tutor powered by Gemini'
    )

    parser.add_argument(
        '--config',
        default='config.json',
        help='Path to configuration file (default: config.json)'
    )

    parser.add_argument(
        '--api-key',
        help='Override the Gemini API key'
    )

    parser.add_argument(
        '--lang',
        choices=LANGUAGES,
        default=LANG_EN,
        help='Response language (default: en)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    chat = subparsers.add_parser('chat', help='Ask the tutor a question')
    chat.add_argument('message')
    chat.add_argument('--persona', choices=PERSONAS, default='standard')
    chat.add_argument('--search', action='store_true', help='Ground the answer with web search')
    chat.add_argument('--thinking', action='store_true', help='Use extended reasoning')
    chat.add_argument('--attach', nargs='*', default=[], help='Files to send with the message')

    quiz = subparsers.add_parser('quiz', help='Generate multiple-choice questions')
    quiz.add_argument('topics', nargs='+')

    mock = subparsers.add_parser('mock-paper', help='Generate a mock exam paper')
    mock.add_argument('type', choices=PAPER_TYPES)
    mock.add_argument('--take', action='store_true', help='Answer the paper and have it graded')

    analyze = subparsers.add_parser('analyze', help='Analyze a source file')
    analyze.add_argument('file')
    analyze.add_argument('--code-lang', help='Language of the code (default: from extension)')

    grade = subparsers.add_parser('grade', help='Grade a submission')
    grade.add_argument('files', nargs='*')
    grade.add_argument('--text', default='', help='Submission text')

    image = subparsers.add_parser('image', help='Generate or edit an image')
    image.add_argument('prompt')
    image.add_argument('--edit', help='PNG file to edit instead of generating')
    image.add_argument('--aspect-ratio', choices=ASPECT_RATIOS, default=DEFAULT_ASPECT_RATIO)
    image.add_argument('--size', choices=IMAGE_SIZES, default=DEFAULT_IMAGE_SIZE)
    image.add_argument('--out', default='image.png', help='Output file (default: image.png)')

    return parser


def main():
    """Main entry point"""
    args = build_parser().parse_args()

    config = load_config(args.config)

    # Apply overrides
    if args.api_key:
        config['gemini']['api_key'] = args.api_key

    try:
        app = TutorApp(config)
        sys.exit(asyncio.run(app.run(args)))
    except ValueError as e:
        print(f"Failed to start tutor: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
