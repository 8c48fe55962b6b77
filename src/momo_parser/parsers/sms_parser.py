"""Mobile-money SMS parser: noise filtering, special cases, generic extraction."""

import logging
from typing import Iterable, List, Optional, Union

from ..models.core import BatchResult, ParsedTransaction, ParserConfig, RawMessage
from ..utils.error_handler import DiagnosticsCollector, ParseOutcome, RejectionReason
from ..utils.validation import ValidationEngine
from .base import MessageParser
from .extractors import FieldExtractor
from .noise_filter import NoiseFilterChain
from .special_cases import AirtimeRechargeHandler, OverdraftFeeHandler, SpecialCaseHandler


logger = logging.getLogger(__name__)


class SmsParser(MessageParser):
    """Turns one provider text message into zero or more transactions.

    Stages run in strict order: noise filter chain, special-case handlers,
    generic field extraction, acceptance check. The parser holds no state
    between calls, so one instance can be shared across threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        super().__init__(config or ParserConfig())
        self.extractor = FieldExtractor(self.config)
        self.noise_filter = NoiseFilterChain(self.config, self.extractor)
        self.handlers: List[SpecialCaseHandler] = [
            OverdraftFeeHandler(self.config, self.extractor),
            AirtimeRechargeHandler(self.config, self.extractor),
        ]
        self.validation_engine = ValidationEngine(self.extractor)

    def parse(self, raw: RawMessage) -> List[ParsedTransaction]:
        """Parse a message; an empty list means no transaction was recognised"""
        return self.parse_with_diagnostics(raw).transactions

    def parse_text(self, body: str, timestamp=None) -> List[ParsedTransaction]:
        """Parse loosely typed source values (timestamp may be epoch or string)"""
        raw = self.extractor.normalizer.to_raw_message(body, timestamp)
        return self.parse(raw)

    def parse_with_diagnostics(self, raw: RawMessage) -> ParseOutcome:
        """Parse a message and report why it was rejected, if it was"""
        body = raw.body if isinstance(raw.body, str) else ''
        if not body.strip():
            return ParseOutcome(reason=RejectionReason.EMPTY_MESSAGE)

        reason = self.noise_filter.first_match(body)
        if reason is not None:
            return ParseOutcome(reason=reason)

        for handler in self.handlers:
            handled = handler.handle(raw)
            if handled is None:
                continue
            if not handled:
                return ParseOutcome(reason=handler.suppression_reason, handler=handler.name)
            return ParseOutcome(transactions=handled, handler=handler.name)

        return self._extract_generic(raw, body)

    def _extract_generic(self, raw: RawMessage, body: str) -> ParseOutcome:
        amount = self.extractor.extract_amount(body)
        direction = self.extractor.classify_direction(body)
        reference = self.extractor.extract_reference(body)
        counterparty = self.extractor.extract_counterparty(body)

        reason = self.validation_engine.check_acceptance(body, amount, direction, reference, counterparty)
        if reason is not None:
            logger.debug(f"Rejected as {reason.value}: {body[:60]!r}")
            return ParseOutcome(reason=reason)

        transaction = ParsedTransaction(
            amount=amount,
            direction=direction,
            raw_message=raw.body,
            counterparty=counterparty,
            reference=reference,
            occurred_at=raw.timestamp,
            provider=self.extractor.detect_provider(body),
            category=self.extractor.detect_category(body, direction) if self.config.detect_categories else None,
        )

        return ParseOutcome(transactions=[transaction])

    def parse_batch(self,
                    messages: Iterable[Union[RawMessage, str]],
                    diagnostics: Optional[DiagnosticsCollector] = None) -> BatchResult:
        """Parse each message independently and collect the results"""
        transactions: List[ParsedTransaction] = []
        total = 0
        accepted = 0

        for message in messages:
            if not isinstance(message, RawMessage):
                message = RawMessage(body=message)

            outcome = self.parse_with_diagnostics(message)
            total += 1
            if outcome.accepted:
                accepted += 1
                transactions.extend(outcome.transactions)
            if diagnostics is not None:
                diagnostics.record(outcome)

        logger.info(f"Parsed {total} messages: {accepted} accepted, {total - accepted} rejected")
        return BatchResult(transactions=transactions, messages_total=total, messages_accepted=accepted)


_default_parser: Optional[SmsParser] = None


def get_default_parser() -> SmsParser:
    """Shared parser built from the default configuration"""
    global _default_parser
    if _default_parser is None:
        _default_parser = SmsParser()
    return _default_parser


def parse_message(body: str, timestamp=None) -> List[ParsedTransaction]:
    """Parse a single message body with the default parser"""
    return get_default_parser().parse_text(body, timestamp)


def parse_messages(messages: Iterable[Union[RawMessage, str]]) -> List[ParsedTransaction]:
    """Parse many messages with the default parser and flatten the results"""
    return get_default_parser().parse_batch(messages).transactions
