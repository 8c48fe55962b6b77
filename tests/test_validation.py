"""Tests for the validation engine."""

from dataclasses import replace
from decimal import Decimal

from momo_parser.models.core import Direction, ParsedTransaction, ParserConfig
from momo_parser.parsers.extractors import FieldExtractor
from momo_parser.utils.error_handler import RejectionReason
from momo_parser.utils.validation import ValidationEngine


class TestValidationEngine:
    """Test cases for ValidationEngine"""

    def setup_method(self):
        self.engine = ValidationEngine(FieldExtractor(ParserConfig()))
        self.transaction = ParsedTransaction(
            amount=Decimal("10.00"),
            direction=Direction.DEBIT,
            raw_message="Sent Ksh 10.00 to Jane Ref QA1",
            counterparty="Jane",
            reference="QA1",
        )

    def test_acceptance_order(self):
        body = "some text"
        assert self.engine.check_acceptance(body, None, Direction.CREDIT, "R1", None) == RejectionReason.NO_AMOUNT
        assert self.engine.check_acceptance(body, Decimal("0.00"), Direction.CREDIT, "R1", None) == RejectionReason.NO_AMOUNT
        assert self.engine.check_acceptance(body, Decimal("5.00"), None, "R1", None) == RejectionReason.NO_DIRECTION
        assert self.engine.check_acceptance(body, Decimal("5.00"), Direction.CREDIT, "R1", None) is None
        assert self.engine.check_acceptance(body, Decimal("5.00"), Direction.CREDIT, None, "Mary") == RejectionReason.NOT_CORROBORATED

    def test_vocabulary_in_counterparty(self):
        reason = self.engine.check_acceptance(
            "received Ksh 5.00", Decimal("5.00"), Direction.CREDIT, None, "KCB Bank"
        )
        assert reason is None

    def test_valid_transaction(self):
        assert self.engine.validate_transaction(self.transaction) == []

    def test_invalid_transaction(self):
        broken = replace(
            self.transaction,
            amount=Decimal("-1.00"),
            reference="  ",
            counterparty="",
            occurred_at="2025-09-12",
        )
        errors = self.engine.validate_transaction(broken)

        assert "Amount must be strictly positive" in errors
        assert "Reference cannot be empty string (use None instead)" in errors
        assert "Counterparty cannot be empty string (use None instead)" in errors
        assert "Invalid occurred_at: must be datetime object or None" in errors

    def test_non_decimal_amount(self):
        errors = self.engine.validate_transaction(replace(self.transaction, amount=10.0))
        assert errors == ["Invalid amount: must be Decimal object"]
