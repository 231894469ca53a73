# common/__init__.py
"""
Common utilities and constants.
"""

from .logger import setup_logging, get_logger
from .constants import *
from .utils import *

__all__ = [
    'setup_logging',
    'get_logger'
]
