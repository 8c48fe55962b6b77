"""Validation engine for extracted fields and emitted transactions."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..models.core import Direction, ParsedTransaction
from .error_handler import RejectionReason


class ValidationEngine:
    """Decides whether extracted fields add up to a real transaction"""

    def __init__(self, extractor):
        self.extractor = extractor

    def check_acceptance(self,
                         body: str,
                         amount: Optional[Decimal],
                         direction: Optional[Direction],
                         reference: Optional[str],
                         counterparty: Optional[str]) -> Optional[RejectionReason]:
        """Return None when the fields may be emitted, else the rejection reason.

        A record needs a positive amount and a direction, and must be
        corroborated by a reference code or provider vocabulary in the body
        or counterparty.
        """
        if amount is None or amount <= 0:
            return RejectionReason.NO_AMOUNT

        if direction is None:
            return RejectionReason.NO_DIRECTION

        if reference:
            return None

        if self.extractor.has_provider_vocabulary(body, counterparty):
            return None

        return RejectionReason.NOT_CORROBORATED

    def validate_transaction(self, transaction: ParsedTransaction) -> List[str]:
        """Validate an assembled transaction and return list of errors"""
        errors = []

        if not isinstance(transaction.amount, Decimal):
            errors.append("Invalid amount: must be Decimal object")
        elif not transaction.amount.is_finite() or transaction.amount <= 0:
            errors.append("Amount must be strictly positive")

        if not isinstance(transaction.direction, Direction):
            errors.append("Invalid direction: must be Direction")

        if transaction.raw_message is None:
            errors.append("Raw message cannot be None")

        if transaction.reference is not None and not str(transaction.reference).strip():
            errors.append("Reference cannot be empty string (use None instead)")

        if transaction.counterparty is not None and not str(transaction.counterparty).strip():
            errors.append("Counterparty cannot be empty string (use None instead)")

        if transaction.occurred_at is not None and not isinstance(transaction.occurred_at, datetime):
            errors.append("Invalid occurred_at: must be datetime object or None")

        return errors
