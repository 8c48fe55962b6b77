"""Data models and structures"""

from .core import (
    BatchResult,
    Direction,
    ParsedTransaction,
    ParserConfig,
    RawMessage,
)

__all__ = [
    'BatchResult',
    'Direction',
    'ParsedTransaction',
    'ParserConfig',
    'RawMessage',
]
