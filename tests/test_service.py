"""
Tests for the tutoring service fallbacks.
Every failure must come back as the documented fallback value, never an exception.
"""

import asyncio
import json
import logging

import pytest
from google.genai import errors

from cs_tutor.models import Attachment, ChatConfig, MockExamPaper, MockExamQuestion


FAILURES = [
    ConnectionError("network down"),
    errors.ServerError(503, {'error': {'code': 503, 'message': 'Unavailable', 'status': 'UNAVAILABLE'}}),
    errors.ClientError(401, {'error': {'code': 401, 'message': 'Bad key', 'status': 'UNAUTHENTICATED'}}),
]


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(params=FAILURES, ids=['transport', 'server', 'auth'])
def failing_sdk(request, sdk):
    sdk.aio.models.generate_content.side_effect = request.param
    return sdk


@pytest.fixture
def paper():
    return MockExamPaper(id="42", type='paper1', title="Mini Mock",
                         questions=[MockExamQuestion(id=1, question="Define RAM.", marks=2)])


class TestFallbacks:
    """Test cases for upstream failures"""

    def test_chat(self, service, failing_sdk):
        reply = run(service.chat_with_gemini([], "q", [], 'standard', 'en', ChatConfig()))

        assert reply.text == "Connection error."
        assert reply.grounding_sources is None
        assert reply.to_dict() == {'text': "Connection error."}

    def test_image(self, service, failing_sdk):
        assert run(service.generate_or_edit_image("A CPU diagram", None)) is None

    def test_quiz(self, service, failing_sdk):
        assert run(service.generate_quiz_questions(["Arrays", "Sorting"], 'en')) == []

    def test_grade_submission(self, service, failing_sdk):
        assert run(service.grade_submission("essay", [], 'en')) == "Error grading."

    def test_analyze_code(self, service, failing_sdk):
        assert run(service.analyze_code("x = 1", "Python", 'en')) == "Error analyzing code."

    def test_mock_paper(self, service, failing_sdk):
        paper = run(service.generate_mock_paper('paper2', 'en'))

        assert paper.id == "error"
        assert paper.title == "Error"
        assert paper.type == 'paper2'
        assert paper.duration_minutes == 0
        assert paper.questions == []

    def test_mock_grading(self, service, failing_sdk, paper):
        result = run(service.grade_mock_paper(paper, {1: "memory"}, 'en'))

        assert result.grade == "U"
        assert result.feedback == "Error"
        assert result.total_marks == 0
        assert result.user_marks == 0
        assert result.question_feedback == []


class TestEmptyResponses:
    """Test cases for successful calls without usable content"""

    def test_grade_submission_no_text(self, service, sdk, make_response):
        sdk.aio.models.generate_content.return_value = make_response(parts=[])

        assert run(service.grade_submission("essay", [], 'en')) == "No feedback."

    def test_analyze_code_no_text(self, service, sdk, make_response):
        sdk.aio.models.generate_content.return_value = make_response(parts=[])

        assert run(service.analyze_code("x = 1", "Python", 'en')) == "Analysis failed."

    def test_quiz_malformed_json(self, service, sdk, make_response):
        sdk.aio.models.generate_content.return_value = make_response(text="not json at all")

        assert run(service.generate_quiz_questions(["Arrays", "Sorting"], 'en')) == []

    def test_mock_grading_malformed_json(self, service, sdk, make_response, paper):
        sdk.aio.models.generate_content.return_value = make_response(text="{")

        assert run(service.grade_mock_paper(paper, {}, 'en')).grade == "U"


class TestRejectedArguments:
    """Invalid arguments also map to fallbacks at the service boundary"""

    def test_unknown_persona(self, service, sdk):
        reply = run(service.chat_with_gemini([], "q", [], 'pirate', 'en'))

        assert reply.text == "Connection error."
        sdk.aio.models.generate_content.assert_not_called()

    def test_unknown_language(self, service, sdk):
        assert run(service.analyze_code("x", "Python", 'fr')) == "Error analyzing code."

    def test_unknown_paper_type(self, service):
        paper = run(service.generate_mock_paper('paper7', 'en'))

        assert paper.id == "error"
        assert paper.type == 'paper1'

    def test_bad_attachment_data(self, service):
        feedback = run(service.grade_submission("essay", [Attachment('image/png', '***')], 'en'))

        assert feedback == "Error grading."


class TestSuccess:
    """Successful values pass through unchanged"""

    def test_mock_paper(self, service, sdk, make_response):
        body = {'title': "Mini Mock", 'questions': [{'id': 1, 'question': "Define RAM.", 'marks': 2}]}
        sdk.aio.models.generate_content.return_value = make_response(text=json.dumps(body))

        paper = run(service.generate_mock_paper('paper1', 'en'))

        assert paper.id != "error"
        assert paper.duration_minutes == 30
        assert paper.questions[0].question == "Define RAM."

    def test_chat_text(self, service):
        reply = run(service.chat_with_gemini(["user: hi"], "q", [], 'socratic', 'zh'))

        assert reply.text == "ok"
        assert reply.grounding_sources == []


class TestUnexpectedErrors:
    """Exceptions of any type stop at the service boundary"""

    def test_chat_config_as_dict(self, service, sdk):
        reply = run(service.chat_with_gemini([], "q", [], 'standard', 'en', {'use_search': True}))

        assert reply.text == "Connection error."
        sdk.aio.models.generate_content.assert_not_called()

    def test_malformed_paper_dict(self, service, sdk):
        result = run(service.grade_mock_paper({'title': "Mini Mock"}, {1: "a"}, 'en'))

        assert result.grade == "U"
        sdk.aio.models.generate_content.assert_not_called()

    def test_paper_dict_is_graded(self, service, sdk, make_response, paper):
        body = {'totalMarks': 2, 'userMarks': 2, 'grade': 'A', 'feedback': "Good.",
                'questionFeedback': [{'id': 1, 'feedback': "Correct.", 'marksAwarded': 2}]}
        sdk.aio.models.generate_content.return_value = make_response(text=json.dumps(body))

        result = run(service.grade_mock_paper(paper.to_dict(), {1: "a"}, 'en'))

        assert result.to_dict() == body

    def test_fallback_logged_with_operation(self, service, sdk, caplog):
        sdk.aio.models.generate_content.side_effect = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger='cs_tutor.service'):
            run(service.grade_submission("essay", [], 'en'))

        assert "grade: returning fallback after transport error" in caplog.text
