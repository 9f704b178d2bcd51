"""Utility modules for Carrousel"""

from .logging_setup import parse_size, setup_logging, setup_logging_from_config

__all__ = [
    "parse_size",
    "setup_logging",
    "setup_logging_from_config",
]
