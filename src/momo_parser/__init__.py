"""Mobile-money SMS notification parser"""

__version__ = "0.1.0"

from .models.core import Direction, ParsedTransaction, ParserConfig, RawMessage
from .parsers.sms_parser import SmsParser, parse_message, parse_messages

__all__ = [
    '__version__',
    'Direction',
    'ParsedTransaction',
    'ParserConfig',
    'RawMessage',
    'SmsParser',
    'parse_message',
    'parse_messages',
]
