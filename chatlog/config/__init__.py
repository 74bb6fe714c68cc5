"""Configuration package exports."""

from .cli import build_parser, parse_args
from .model import AuthMode, SessionConfig

__all__ = ["AuthMode", "SessionConfig", "build_parser", "parse_args"]
