"""Rejection diagnostics and logging setup for the SMS parser."""

import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any

from ..models.core import ParsedTransaction


class RejectionReason(Enum):
    """Why a message produced no transactions"""
    EMPTY_MESSAGE = "empty_message"
    FAILED_TRANSACTION = "failed_transaction"
    NON_TRANSACTIONAL_PRODUCT = "non_transactional_product"
    DATA_BUNDLE = "data_bundle"
    SAVINGS_STATEMENT = "savings_statement"
    SMS_COST_NOTICE = "sms_cost_notice"
    MINI_STATEMENT = "mini_statement"
    PROMOTION = "promotion"
    EXPIRY_REMINDER = "expiry_reminder"
    CALL_TO_ACTION = "call_to_action"
    OPT_OUT = "opt_out"
    OVERDRAFT_SUPPRESSED = "overdraft_suppressed"
    NO_AMOUNT = "no_amount"
    NO_DIRECTION = "no_direction"
    NOT_CORROBORATED = "not_corroborated"


@dataclass
class ParseOutcome:
    """Transactions produced for one message, with the rejection reason if any"""
    transactions: List[ParsedTransaction] = field(default_factory=list)
    reason: Optional[RejectionReason] = None
    handler: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return bool(self.transactions)


class DiagnosticsCollector:
    """Accumulates parse outcomes over a batch for reporting"""

    def __init__(self):
        self.reasons: Counter = Counter()
        self.handlers: Counter = Counter()
        self.accepted = 0
        self.rejected = 0
        self.transactions = 0

    def record(self, outcome: ParseOutcome) -> None:
        if outcome.handler:
            self.handlers[outcome.handler] += 1

        if outcome.accepted:
            self.accepted += 1
            self.transactions += len(outcome.transactions)
        else:
            self.rejected += 1
            if outcome.reason is not None:
                self.reasons[outcome.reason.value] += 1

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of accepted and rejected messages"""
        return {
            'messages_total': self.accepted + self.rejected,
            'messages_accepted': self.accepted,
            'messages_rejected': self.rejected,
            'transactions': self.transactions,
            'rejections_by_reason': dict(self.reasons.most_common()),
            'handled_by': dict(self.handlers),
        }

    def generate_report(self, output_file: str) -> str:
        """Write the summary to a JSON report file"""
        report = {
            'report_timestamp': datetime.now().isoformat(),
            'summary': self.get_summary(),
        }

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, default=str)

        logging.getLogger(__name__).info(f"Diagnostics report generated: {output_file}")
        return output_file

    def clear(self) -> None:
        self.reasons.clear()
        self.handlers.clear()
        self.accepted = 0
        self.rejected = 0
        self.transactions = 0


class JSONFormatter(logging.Formatter):
    """One JSON object per log record"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'reason'):
            log_entry['reason'] = record.reason
        if hasattr(record, 'context'):
            log_entry['context'] = record.context

        return json.dumps(log_entry, default=str)


def setup_logging(verbose: bool = False, json_logs: bool = False) -> logging.Logger:
    """Configure the package logger for console output.

    Logs go to stderr so that stdout stays clean for parsed records.
    """
    logger = logging.getLogger('momo_parser')
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(handler)

    return logger
