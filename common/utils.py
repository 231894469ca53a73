"""
Common utilities for the CS tutor client.
"""

import base64
import copy
import itertools
import json
import mimetypes
import os
import re
import time
from typing import Dict, Any, Optional

from .constants import API_KEY_ENV_VARS, DEFAULT_MODELS, THINKING_BUDGET
from .logger import DEFAULT_LOGGING


DEFAULT_CONFIG = {
    'gemini': {
        'api_key': None,
        'models': DEFAULT_MODELS,
        'thinking_budget': THINKING_BUDGET
    },
    'logging': DEFAULT_LOGGING
}

_id_counter = itertools.count(1)


def timestamp() -> float:
    """Get current timestamp"""
    return time.time()


def generate_paper_id() -> str:
    """Generate a time-derived ID that never repeats within the process"""
    return f"{int(timestamp() * 1000)}-{next(_id_counter)}"


def encode_base64(data: bytes) -> str:
    """Encode raw bytes as base64 text"""
    return base64.b64encode(data).decode('ascii')


def decode_base64(data: str) -> bytes:
    """Decode base64 text, rejecting malformed input"""
    return base64.b64decode(data, validate=True)


def guess_mime_type(file_path: str) -> str:
    """Guess a MIME type from the file name"""
    mime_type, _ = mimetypes.guess_type(file_path)
    if mime_type:
        return mime_type
    if get_file_extension(file_path) in ['.pseudo', '.pse']:
        return 'text/plain'
    return 'application/octet-stream'


def read_file_base64(file_path: str) -> str:
    """Read a binary file and return its content as base64 text"""
    try:
        with open(file_path, 'rb') as file:
            return encode_base64(file.read())
    except OSError as e:
        raise Exception(f"Failed to read file: {e}")


def read_text_file(file_path: str) -> str:
    """Read content from a text file"""
    try:
        with open(file_path, 'r', encoding='utf-8') as file:
            return file.read()
    except Exception as e:
        raise Exception(f"Failed to read text file: {e}")


def save_file(content: bytes, file_path: str):
    """Save content to a file"""
    try:
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(file_path, 'wb') as file:
            file.write(content)
    except Exception as e:
        raise Exception(f"Failed to save file: {e}")


def load_json_file(file_path: str) -> Dict[str, Any]:
    """Load JSON data from a file"""
    try:
        if os.path.exists(file_path):
            with open(file_path, 'r') as file:
                return json.load(file)
        return {}
    except Exception as e:
        raise Exception(f"Failed to load JSON file: {e}")


_JSON_FENCE = re.compile(r'\s*```(?:json)?\s*(.*?)\s*```\s*', re.DOTALL | re.IGNORECASE)


def clean_json_text(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole JSON body"""
    match = _JSON_FENCE.fullmatch(text)
    return match.group(1) if match else text.strip()


def parse_json_text(text: Optional[str]) -> Any:
    """Parse model output as JSON; raises ValueError when it is not"""
    if not text or not text.strip():
        raise ValueError("Empty response text")
    return json.loads(clean_json_text(text))


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override values into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_api_key(configured: Optional[str] = None) -> Optional[str]:
    """Return the configured API key, or the first one found in the environment"""
    if configured:
        return configured
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file over the built-in defaults.

    Args:
        config_path: Path to configuration file; missing files yield defaults

    Returns:
        Configuration dictionary with 'gemini' and 'logging' sections
    """
    overrides = load_json_file(config_path) if config_path else {}
    config = merge_config(DEFAULT_CONFIG, overrides)
    config['gemini']['api_key'] = resolve_api_key(config['gemini'].get('api_key'))
    return config


def get_file_extension(filename: str) -> str:
    """Get file extension from filename"""
    return os.path.splitext(filename)[1].lower()
