"""Core data models for the mobile-money SMS parser."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Dict, Any, Optional


class Direction(Enum):
    """Money movement relative to the account holder"""
    CREDIT = "credit"
    DEBIT = "debit"


@dataclass(frozen=True)
class RawMessage:
    """Inbound text message as supplied by the message source.

    Attributes:
        body: Message content, untrimmed, may contain newlines
        timestamp: Provider-reported send time, None if unavailable
    """
    body: str
    timestamp: Optional[datetime] = None


@dataclass
class ParsedTransaction:
    """Structured transaction extracted from a single message"""
    amount: Decimal
    direction: Direction
    raw_message: str
    counterparty: Optional[str] = None
    reference: Optional[str] = None
    occurred_at: Optional[datetime] = None
    provider: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            'amount': str(self.amount),
            'direction': self.direction.value,
            'counterparty': self.counterparty,
            'reference': self.reference,
            'occurred_at': self.occurred_at.isoformat() if self.occurred_at else None,
            'provider': self.provider,
            'category': self.category,
            'raw_message': self.raw_message,
        }


@dataclass
class BatchResult:
    """Result of parsing a batch of messages"""
    transactions: List[ParsedTransaction]
    messages_total: int
    messages_accepted: int

    @property
    def messages_rejected(self) -> int:
        return self.messages_total - self.messages_accepted

    @property
    def acceptance_rate(self) -> float:
        """Percentage of messages that produced at least one record"""
        if self.messages_total == 0:
            return 0.0
        return (self.messages_accepted / self.messages_total) * 100


@dataclass
class ParserConfig:
    """Configuration for parser behavior"""
    currency_codes: Optional[List[str]] = None
    brand_keywords: Optional[Dict[str, str]] = None
    airtime_counterparty: str = "Airtime Recharge"
    detect_categories: bool = True

    def __post_init__(self):
        if self.currency_codes is None:
            self.currency_codes = [
                "KSh", "Ksh", "KES", "Kes", "USD", "US$", "UGX",
                "TZS", "GHS", "NGN", "ZAR", "EUR", "GBP"
            ]
        if self.brand_keywords is None:
            self.brand_keywords = {
                "M-PESA": r"\bm-?\s?pesa\b",
                "Airtel Money": r"\bairtel\s+money\b",
                "T-Kash": r"\bt-?kash\b",
            }
