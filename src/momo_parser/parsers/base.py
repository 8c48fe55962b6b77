"""Abstract base classes and shared normalization for message parsers."""

import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional, Union

from ..models.core import ParsedTransaction, ParserConfig, RawMessage


class MessageParser(ABC):
    """Abstract base class for all message parsers"""

    def __init__(self, config: ParserConfig):
        self.config = config

    @abstractmethod
    def parse(self, raw: RawMessage) -> List[ParsedTransaction]:
        """Parse one message and return zero or more transactions"""
        pass


class MessageNormalizer:
    """Normalizes raw field values pulled out of message text"""

    TIMESTAMP_FORMATS = [
        "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d",
        "%d/%m/%Y %H:%M:%S", "%d/%m/%Y", "%d/%m/%y %I:%M %p",
        "%d/%m/%y", "%d %b %Y", "%d %B %Y",
    ]

    # Epoch values above this are taken to be milliseconds
    MILLIS_THRESHOLD = 10 ** 11

    def normalize_amount(self, amount_str: Optional[str]) -> Optional[Decimal]:
        """Convert a numeric token to Decimal with two-decimal precision.

        Grouping separators are stripped before parsing. Anything that does
        not parse to a finite number yields None rather than an error.
        """
        if amount_str is None:
            return None

        cleaned = re.sub(r'[,\s]', '', str(amount_str))
        if not cleaned or cleaned == '.':
            return None

        try:
            amount = Decimal(cleaned)
            if not amount.is_finite():
                return None
            # Raises when the value needs more digits than the context precision
            return amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return None

    def coerce_timestamp(self, value: Union[datetime, int, float, str, None]) -> Optional[datetime]:
        """Coerce a provider timestamp to datetime.

        Accepts datetime objects, epoch seconds or milliseconds, and ISO or
        common date strings. Unparseable input yields None.
        """
        if value is None or isinstance(value, bool):
            return None

        if isinstance(value, datetime):
            return value

        if isinstance(value, (int, float)):
            seconds = value / 1000 if abs(value) >= self.MILLIS_THRESHOLD else value
            try:
                return datetime.fromtimestamp(seconds, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                return None

        text = str(value).strip()
        if not text:
            return None

        if re.fullmatch(r'\d+(?:\.\d+)?', text):
            return self.coerce_timestamp(float(text))

        try:
            return datetime.fromisoformat(text.replace('Z', '+00:00'))
        except ValueError:
            pass

        for fmt in self.TIMESTAMP_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        return None

    def clean_counterparty(self, name: Optional[str]) -> Optional[str]:
        """Collapse whitespace and trim trailing punctuation"""
        if not name:
            return None

        cleaned = ' '.join(str(name).split())
        cleaned = re.sub(r'[.,;:!\-]+$', '', cleaned).strip()

        return cleaned or None

    def to_raw_message(self, body: Optional[str], timestamp=None) -> RawMessage:
        """Build a RawMessage from loosely typed source values"""
        return RawMessage(body=body or '', timestamp=self.coerce_timestamp(timestamp))
