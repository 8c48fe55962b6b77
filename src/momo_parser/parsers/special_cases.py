"""Handlers that intercept specific message shapes before generic extraction."""

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.core import Direction, ParsedTransaction, ParserConfig, RawMessage
from ..utils.error_handler import RejectionReason
from .extractors import FieldExtractor


logger = logging.getLogger(__name__)


OVERDRAFT_PRODUCT_PATTERN = re.compile(r'\bfuliza\b', re.IGNORECASE)

AIRTIME_RECHARGE_PATTERN = re.compile(
    r'\b(?:recharge|top[- ]?up)\b.*?\bsuccessful(?:ly)?\b'
    r'|\bsuccessfully\s+(?:recharged|topped\s+up)\b'
    r'|\bbought\b.{0,30}?\bof\s+airtime\b',
    re.IGNORECASE | re.DOTALL
)


class SpecialCaseHandler(ABC):
    """A handler either claims a message (returns a list) or declines (None)"""

    name = "special_case"
    suppression_reason: Optional[RejectionReason] = None

    def __init__(self, config: ParserConfig, extractor: FieldExtractor):
        self.config = config
        self.extractor = extractor

    @abstractmethod
    def handle(self, raw: RawMessage) -> Optional[List[ParsedTransaction]]:
        pass


class OverdraftFeeHandler(SpecialCaseHandler):
    """Suppresses overdraft (Fuliza) messages entirely.

    The access fee in these messages is not recorded either; the principal
    is reported in the adjacent transaction message.
    """

    name = "overdraft_fee"
    suppression_reason = RejectionReason.OVERDRAFT_SUPPRESSED

    def handle(self, raw: RawMessage) -> Optional[List[ParsedTransaction]]:
        if OVERDRAFT_PRODUCT_PATTERN.search(raw.body) is None:
            return None
        logger.debug(f"Overdraft message suppressed: {raw.body[:60]!r}")
        return []


class AirtimeRechargeHandler(SpecialCaseHandler):
    """Successful airtime recharges are always an outgoing spend"""

    name = "airtime_recharge"

    def handle(self, raw: RawMessage) -> Optional[List[ParsedTransaction]]:
        if AIRTIME_RECHARGE_PATTERN.search(raw.body) is None:
            return None

        amount = self.extractor.extract_amount(raw.body)
        if amount is None or amount <= 0:
            return None

        return [ParsedTransaction(
            amount=amount,
            direction=Direction.DEBIT,
            raw_message=raw.body,
            counterparty=self.config.airtime_counterparty,
            reference=self.extractor.extract_reference(raw.body),
            occurred_at=raw.timestamp,
            provider=self.extractor.detect_provider(raw.body),
            category='Airtime' if self.config.detect_categories else None,
        )]
