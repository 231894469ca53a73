"""
Logging configuration for the CS tutor client.
Provides consistent logging across all components.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler


DEFAULT_LOGGING = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'file': 'logs/cs_tutor.log'
}


def setup_logging(config: dict = None):
    """
    Set up logging configuration for the entire application.

    Args:
        config: Configuration dictionary with logging settings. A falsy
            'file' entry disables the rotating file handler.
    """
    config = {**DEFAULT_LOGGING, **(config or {})}

    # Set up root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config['level'].upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config['format'])

    # Console handler goes to stderr so command output stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config['file']:
        log_dir = os.path.dirname(config['file'])
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # File handler with rotation
        file_handler = RotatingFileHandler(
            config['file'],
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Set specific log levels for noisy libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('google_genai').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Name of the module (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
