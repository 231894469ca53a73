"""
Tests for common utilities and logging setup.
"""

import json
import logging

import pytest

from common.constants import DEFAULT_MODELS, THINKING_BUDGET
from common.logger import setup_logging, get_logger
from common.utils import (
    generate_paper_id, parse_json_text, load_config, merge_config,
    encode_base64, decode_base64, guess_mime_type
)


class TestIds:
    def test_paper_ids_distinct(self):
        ids = {generate_paper_id() for _ in range(1000)}

        assert len(ids) == 1000


class TestJson:
    def test_plain_json(self):
        assert parse_json_text('{"a": 1}') == {'a': 1}

    def test_fenced_json(self):
        assert parse_json_text('```json\n[1, 2]\n```') == [1, 2]

    def test_bare_fence(self):
        assert parse_json_text('```\n{"a": 1}\n```\n') == {'a': 1}

    def test_backticks_inside_strings_kept(self):
        body = {'feedback': "Wrap code in ``` fences like ```python x ``` next time.",
                'hint': "Use ```json``` blocks"}

        assert parse_json_text(json.dumps(body)) == body
        assert parse_json_text(f"```json\n{json.dumps(body)}\n```") == body

    @pytest.mark.parametrize('text', [None, "", "   ", "{", "nope"])
    def test_invalid_json(self, text):
        with pytest.raises(ValueError):
            parse_json_text(text)


class TestBase64:
    def test_round_trip(self):
        assert decode_base64(encode_base64(b'\x89PNG')) == b'\x89PNG'

    def test_invalid(self):
        with pytest.raises(ValueError):
            decode_base64("not*base64")

    def test_mime_types(self):
        assert guess_mime_type("essay.pdf") == 'application/pdf'
        assert guess_mime_type("search.pseudo") == 'text/plain'
        assert guess_mime_type("blob.unknownext") == 'application/octet-stream'


class TestConfig:
    """Test cases for configuration loading"""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv('GEMINI_API_KEY', raising=False)
        monkeypatch.delenv('GOOGLE_API_KEY', raising=False)

        config = load_config(str(tmp_path / "missing.json"))

        assert config['gemini']['models'] == DEFAULT_MODELS
        assert config['gemini']['thinking_budget'] == THINKING_BUDGET
        assert config['gemini']['api_key'] is None

    def test_file_overrides(self, tmp_path, monkeypatch):
        monkeypatch.delenv('GEMINI_API_KEY', raising=False)
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            'gemini': {'api_key': 'file-key', 'models': {'fast': 'gemini-x'}},
            'logging': {'level': 'DEBUG'}
        }))

        config = load_config(str(path))

        assert config['gemini']['api_key'] == 'file-key'
        assert config['gemini']['models']['fast'] == 'gemini-x'
        assert config['gemini']['models']['chat_default'] == DEFAULT_MODELS['chat_default']
        assert config['logging']['level'] == 'DEBUG'

    def test_environment_key(self, tmp_path, monkeypatch):
        monkeypatch.setenv('GEMINI_API_KEY', 'env-key')

        assert load_config(str(tmp_path / "none.json"))['gemini']['api_key'] == 'env-key'

    def test_merge_does_not_mutate_base(self):
        base = {'a': {'b': 1}}
        merged = merge_config(base, {'a': {'c': 2}})

        assert merged == {'a': {'b': 1, 'c': 2}}
        assert base == {'a': {'b': 1}}


class TestLogging:
    def test_setup_without_file(self):
        setup_logging({'level': 'DEBUG', 'file': None})

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger('httpx').level == logging.WARNING

    def test_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "tutor.log"
        setup_logging({'file': str(log_file)})

        get_logger("cs_tutor.test").info("hello")

        assert log_file.exists()
