"""Message parsers for mobile-money notifications"""

from .base import MessageParser, MessageNormalizer
from .extractors import FieldExtractor
from .noise_filter import NoiseFilterChain
from .special_cases import SpecialCaseHandler, OverdraftFeeHandler, AirtimeRechargeHandler
from .sms_parser import SmsParser, get_default_parser, parse_message, parse_messages

__all__ = [
    'MessageParser',
    'MessageNormalizer',
    'FieldExtractor',
    'NoiseFilterChain',
    'SpecialCaseHandler',
    'OverdraftFeeHandler',
    'AirtimeRechargeHandler',
    'SmsParser',
    'get_default_parser',
    'parse_message',
    'parse_messages',
]
