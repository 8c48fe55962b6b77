"""Ordered chain of predicates rejecting non-transactional messages."""

import logging
import re
from typing import Callable, List, Optional, Tuple

from ..models.core import ParserConfig
from ..utils.error_handler import RejectionReason
from .extractors import FieldExtractor


logger = logging.getLogger(__name__)


FAILURE_PATTERN = re.compile(
    r'\bfailed\b|\binsufficient\s+(?:funds|balance)\b|\bnot\s+successful\b|\bunsuccessful\b',
    re.IGNORECASE
)
# Airtime advance product, always noise
NON_TRANSACTIONAL_PRODUCT_PATTERN = re.compile(r'\bokoa\s+jahazi\b', re.IGNORECASE)
DATA_BUNDLE_PATTERN = re.compile(
    r'you\s+have\s+received\b.*?\b\d+(?:\.\d+)?\s*(?:MB|GB)\b.*?\bdata\b'
    r'|valid\s+for\s+the\s+next\s+hour|airtime\s+reward',
    re.IGNORECASE | re.DOTALL
)
SAVINGS_PRODUCT_PATTERN = re.compile(r'\bm-?\s?shwari\b', re.IGNORECASE)
SMS_COST_PATTERN = re.compile(r'\bsms\s+costs?\s+(?:ksh|kes)', re.IGNORECASE)
BRACKETED_SEGMENT_PATTERN = re.compile(r'\[[^\]]*\]|\([^)]*\)')
TRANSACTION_COST_PATTERN = re.compile(r'\btransaction\s+cost', re.IGNORECASE)
PROMOTION_PATTERN = re.compile(r'\b(?:offers?|rewards?|promos?|promotions?|bonus(?:es)?|gifts?|sales?)\b', re.IGNORECASE)
EXPIRY_PATTERN = re.compile(
    r'\b(?:expir(?:e|es|ed|y|ing)|renew(?:al|als|ed|s)?|will\s+be\s+renewed|auto-?renew\w*)\b',
    re.IGNORECASE
)
CALL_TO_ACTION_PATTERN = re.compile(
    r'\b(?:dial|reply|click|buy|get|call|visit|download|install)\b[^.!?\n]{0,40}?\b(?:now|today|here|link|app)\b',
    re.IGNORECASE
)
OPT_OUT_PATTERN = re.compile(r'\bstop\s+to\s+\d+', re.IGNORECASE)


class NoiseFilterChain:
    """Rejects messages that look like transactions but are not.

    Predicates are evaluated in a fixed order and the first one that fires
    decides the rejection reason. The promotional and call-to-action
    predicates are guarded: a message carrying a currency amount together
    with credit/debit vocabulary or a 'confirmed' marker is a real receipt
    with marketing copy appended, and passes those two predicates.
    """

    def __init__(self, config: Optional[ParserConfig] = None, extractor: Optional[FieldExtractor] = None):
        self.config = config or ParserConfig()
        self.extractor = extractor or FieldExtractor(self.config)
        self.predicates: List[Tuple[RejectionReason, Callable[[str], bool]]] = [
            (RejectionReason.FAILED_TRANSACTION, self.is_failure),
            (RejectionReason.NON_TRANSACTIONAL_PRODUCT, self.is_non_transactional_product),
            (RejectionReason.DATA_BUNDLE, self.is_data_bundle),
            (RejectionReason.SAVINGS_STATEMENT, self.is_savings_statement),
            (RejectionReason.SMS_COST_NOTICE, self.is_sms_cost_notice),
            (RejectionReason.MINI_STATEMENT, self.is_mini_statement),
            (RejectionReason.PROMOTION, self.is_promotion),
            (RejectionReason.EXPIRY_REMINDER, self.is_expiry_reminder),
            (RejectionReason.CALL_TO_ACTION, self.is_call_to_action),
            (RejectionReason.OPT_OUT, self.is_opt_out),
        ]

    def first_match(self, body: str) -> Optional[RejectionReason]:
        """Return the reason of the first predicate that rejects the message"""
        for reason, predicate in self.predicates:
            if predicate(body):
                logger.debug(f"Rejected as {reason.value}: {body[:60]!r}")
                return reason
        return None

    def should_reject(self, body: str) -> bool:
        return self.first_match(body) is not None

    def looks_like_transaction(self, body: str) -> bool:
        """Guard for promotional wording appended to real receipts"""
        if not self.extractor.has_currency_amount(body):
            return False
        return (
            self.extractor.has_credit_cue(body)
            or self.extractor.has_debit_cue(body)
            or self.extractor.has_confirmation(body)
        )

    def is_failure(self, body: str) -> bool:
        return FAILURE_PATTERN.search(body) is not None

    def is_non_transactional_product(self, body: str) -> bool:
        return NON_TRANSACTIONAL_PRODUCT_PATTERN.search(body) is not None

    def is_data_bundle(self, body: str) -> bool:
        return DATA_BUNDLE_PATTERN.search(body) is not None

    def is_savings_statement(self, body: str) -> bool:
        return SAVINGS_PRODUCT_PATTERN.search(body) is not None

    def is_sms_cost_notice(self, body: str) -> bool:
        return SMS_COST_PATTERN.search(body) is not None

    def is_mini_statement(self, body: str) -> bool:
        """Two or more bracketed entries plus a transaction-cost phrase"""
        if len(BRACKETED_SEGMENT_PATTERN.findall(body)) < 2:
            return False
        return TRANSACTION_COST_PATTERN.search(body) is not None

    def is_promotion(self, body: str) -> bool:
        if PROMOTION_PATTERN.search(body) is None:
            return False
        return not self.looks_like_transaction(body)

    def is_expiry_reminder(self, body: str) -> bool:
        return EXPIRY_PATTERN.search(body) is not None

    def is_call_to_action(self, body: str) -> bool:
        if CALL_TO_ACTION_PATTERN.search(body) is None:
            return False
        return not self.looks_like_transaction(body)

    def is_opt_out(self, body: str) -> bool:
        return OPT_OUT_PATTERN.search(body) is not None
