"""
Shared fixtures: a stand-in for the Gen AI SDK client and response builders.
"""

import pytest
from unittest.mock import Mock, AsyncMock

from google.genai import types

from cs_tutor.gemini_client import GeminiClient
from cs_tutor.service import TutoringService


def build_response(text=None, parts=None, sources=None):
    """Build a GenerateContentResponse with one candidate"""
    if parts is None:
        parts = [types.Part(text=text)] if text is not None else []

    grounding = None
    if sources is not None:
        grounding = types.GroundingMetadata(grounding_chunks=[
            types.GroundingChunk(web=types.GroundingChunkWeb(title=title, uri=uri))
            for title, uri in sources
        ])

    candidate = types.Candidate(
        content=types.Content(role='model', parts=parts),
        grounding_metadata=grounding
    )
    return types.GenerateContentResponse(candidates=[candidate])


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def sdk():
    """Double for genai.Client exposing aio.models.generate_content"""
    sdk = Mock()
    sdk.aio.models.generate_content = AsyncMock(return_value=build_response(text="ok"))
    return sdk


@pytest.fixture
def client(sdk):
    return GeminiClient(client=sdk)


@pytest.fixture
def service(client):
    return TutoringService(client)


@pytest.fixture
def last_request(sdk):
    """Keyword arguments of the most recent generate_content call"""
    def _last_request():
        return sdk.aio.models.generate_content.call_args.kwargs
    return _last_request
