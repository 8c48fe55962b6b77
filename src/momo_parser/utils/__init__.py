"""Utility functions and helpers"""

from .validation import ValidationEngine
from .config_manager import ConfigManager, get_default_config_manager
from .error_handler import DiagnosticsCollector, ParseOutcome, RejectionReason, setup_logging

__all__ = [
    'ValidationEngine',
    'ConfigManager',
    'get_default_config_manager',
    'DiagnosticsCollector',
    'ParseOutcome',
    'RejectionReason',
    'setup_logging',
]
