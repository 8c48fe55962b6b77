"""Field extractors for amount, direction, reference and counterparty.

Each extractor is a best-effort pattern matcher with its own fallback order.
None of them raise on malformed text; a field that cannot be recognised is
returned as None. Patterns are compiled once per extractor instance from the
parser configuration.
"""

import logging
import re
from decimal import Decimal
from typing import Optional, List, Pattern, Tuple

from ..models.core import Direction, ParserConfig
from .base import MessageNormalizer


logger = logging.getLogger(__name__)


NUMBER = r'(?:[0-9]{1,3}(?:,[0-9]{3})+|[0-9]+)(?:\.[0-9]{1,2})?'

CREDIT_PATTERN = re.compile(
    r'\b(?:received|credited|deposit(?:ed)?|payment\s+received|'
    r'transfer(?:red)?\s+from|incoming\s+transfer)\b'
    r'|\bgive\b.{0,40}?\bcash\s+to\b',
    re.IGNORECASE | re.DOTALL
)

DEBIT_PATTERN = re.compile(
    r'\b(?:sent\s+to|paid|withdrawn|debited|purchase\s+at|payment\s+of|spent|'
    r'transfer(?:red)?\s+to|outgoing\s+transfer)\b',
    re.IGNORECASE
)

CONFIRMED_PATTERN = re.compile(r'\bconfirmed\b', re.IGNORECASE)

REFERENCE_PATTERN = re.compile(
    r'\b(?:ref(?:erence)?(?:\s*(?:no|number))?|tran\s?id|transaction\s+id|trx\s?id)\b'
    r'\s*[:#.\-]?\s*(?:(?:is|was|for|the|no)[ \t]+){0,2}([A-Za-z0-9][A-Za-z0-9\-/]*)',
    re.IGNORECASE
)

LEADING_CODE_PATTERN = re.compile(r'^\s*([A-Za-z0-9]{8,15})\s+confirmed\b', re.IGNORECASE)

NAME_TOKENS = r"[A-Z&][\w&.'\-]*(?:[ \t]+[A-Z0-9&][\w&.'\-]*)*"

# Prepositional phrases, tried in order
COUNTERPARTY_PATTERNS = [
    re.compile(r'\b(?i:from|by|to)[ \t]+(' + NAME_TOKENS + ')'),
    re.compile(r'\b(?i:at)[ \t]+(' + NAME_TOKENS + ')'),
]

BANK_PATTERN = re.compile(r"\b((?:[A-Z][A-Za-z&']*[ \t]+){1,3}(?i:bank))\b")
BANK_TOKEN_PATTERN = re.compile(r'\bbank\b', re.IGNORECASE)

# Tokens that end a counterparty name
COUNTERPARTY_STOPWORDS = {
    'ref', 'refno', 'reference', 'tranid', 'trxid', 'transaction', 'txn',
    'on', 'at', 'new', 'for', 'via', 'balance', 'acc', 'account', 'amount',
    'date', 'time', 'and', 'is', 'was', 'the',
}

PROVIDER_PATTERNS: List[Tuple[str, str]] = [
    ('M-Pesa', r'\b(?:mpesa|m-pesa|m pesa|safaricom)\b'),
    ('Airtel', r'\bairtel\b'),
    ('Equity', r'\b(?:equity|eazzy)\b'),
    ('KCB', r'\b(?:kcb|kenya commercial)\b'),
    ('Cooperative', r'\b(?:cooperative|co-op)\b'),
    ('NCBA', r'\bncba\b'),
    ('Absa', r'\b(?:absa|barclays)\b'),
    ('Standard', r'\b(?:standard chartered|stanchart)\b'),
    ('DTB', r'\b(?:diamond trust|dtb)\b'),
    ('Family', r'\bfamily bank\b'),
    ('I&M', r'\bi ?& ?m\b'),
    ('Bank', r'\b(?:bank|atm|pos|card)\b'),
]

DEBIT_CATEGORIES: List[Tuple[str, str]] = [
    ('Food & Dining', r'food|restaurant|cafe|dining|meal|lunch|dinner|breakfast'),
    ('Transportation', r'transport|taxi|uber|bus|fuel|petrol|parking'),
    ('Shopping', r'shop|store|market|supermarket|mall'),
    ('Bills & Utilities', r'bill|electricity|water|internet|phone|utilit'),
    ('Healthcare', r'medical|hospital|pharmacy|doctor|health|clinic'),
    ('Entertainment', r'entertainment|movie|game|music|netflix'),
    ('Education', r'education|school|course|book|tuition'),
]

CREDIT_CATEGORIES: List[Tuple[str, str]] = [
    ('Salary', r'salary|wage|payroll'),
    ('Business', r'business|freelance|contract'),
    ('Investment', r'investment|dividend|interest'),
    ('Other Income', r'gift|bonus|reward'),
]


class FieldExtractor:
    """Pulls individual transaction fields out of message text"""

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.normalizer = MessageNormalizer()

        self.currency_tokens = {code.lower() for code in self.config.currency_codes}
        currencies = sorted(self.config.currency_codes, key=len, reverse=True)
        currency_alt = '|'.join(re.escape(code) for code in currencies)
        self.currency_amount_pattern: Pattern = re.compile(
            r'(?<![A-Za-z])(?:' + currency_alt + r')\.?\s?(' + NUMBER + r')(?![0-9])',
            re.IGNORECASE
        )
        self.bare_amount_pattern: Pattern = re.compile(r'(?<![\w.,])(' + NUMBER + r')(?![\w])')

        self.brand_patterns: List[Tuple[str, Pattern]] = [
            (label, re.compile(pattern, re.IGNORECASE))
            for label, pattern in self.config.brand_keywords.items()
        ]
        self.provider_patterns: List[Tuple[str, Pattern]] = [
            (label, re.compile(pattern, re.IGNORECASE)) for label, pattern in PROVIDER_PATTERNS
        ]
        self.debit_categories = [(label, re.compile(p, re.IGNORECASE)) for label, p in DEBIT_CATEGORIES]
        self.credit_categories = [(label, re.compile(p, re.IGNORECASE)) for label, p in CREDIT_CATEGORIES]

    def extract_amount(self, body: str) -> Optional[Decimal]:
        """Currency-prefixed amount first, then any bare numeric token"""
        if not body:
            return None

        match = self.currency_amount_pattern.search(body)
        if match:
            return self.normalizer.normalize_amount(match.group(1))

        match = self.bare_amount_pattern.search(body)
        if match:
            return self.normalizer.normalize_amount(match.group(1))

        return None

    def has_currency_amount(self, body: str) -> bool:
        return bool(body) and self.currency_amount_pattern.search(body) is not None

    def has_credit_cue(self, body: str) -> bool:
        return bool(body) and CREDIT_PATTERN.search(body) is not None

    def has_debit_cue(self, body: str) -> bool:
        return bool(body) and DEBIT_PATTERN.search(body) is not None

    def has_confirmation(self, body: str) -> bool:
        return bool(body) and CONFIRMED_PATTERN.search(body) is not None

    def classify_direction(self, body: str) -> Optional[Direction]:
        """Classify money in versus money out.

        When both credit and debit cues are present the message is
        classified as credit.
        """
        is_credit = self.has_credit_cue(body)
        is_debit = self.has_debit_cue(body)

        if is_credit and not is_debit:
            return Direction.CREDIT
        if is_debit and not is_credit:
            return Direction.DEBIT

        # Both or neither matched
        if is_credit:
            return Direction.CREDIT
        if is_debit:
            return Direction.DEBIT
        return None

    def extract_reference(self, body: str) -> Optional[str]:
        """Labelled reference first, then a leading '<CODE> confirmed' token"""
        if not body:
            return None

        for match in REFERENCE_PATTERN.finditer(body):
            code = match.group(1).rstrip('-/')
            if self._looks_like_code(code):
                return code

        match = LEADING_CODE_PATTERN.search(body)
        if match:
            return match.group(1)

        return None

    @staticmethod
    def _looks_like_code(token: str) -> bool:
        """Codes carry a digit or are written in capitals; plain words are not codes"""
        return bool(token) and (any(ch.isdigit() for ch in token) or token.isupper())

    def extract_counterparty(self, body: str) -> Optional[str]:
        """Prepositional phrase, then brand keyword, then '<words> Bank'"""
        if not body:
            return None

        for pattern in COUNTERPARTY_PATTERNS:
            for match in pattern.finditer(body):
                name = self._trim_name(match.group(1))
                if name:
                    return name

        brand = self.find_brand(body)
        if brand:
            return brand

        match = BANK_PATTERN.search(body)
        if match:
            return self.normalizer.clean_counterparty(match.group(1))

        return None

    def _trim_name(self, phrase: str) -> Optional[str]:
        """Cut a captured name at the first label, currency or stop word"""
        kept = []
        for token in phrase.split():
            bare = token.strip(".,;:!").lower()
            if bare in COUNTERPARTY_STOPWORDS:
                break
            if self.currency_amount_pattern.match(token) or bare in self.currency_tokens:
                break
            if re.fullmatch(r"[0-9+\-/:]+", bare):
                break
            kept.append(token)
            if token[-1] in '.,;:!' and not re.fullmatch(r'(?:[A-Za-z]\.)+', token):
                break
        return self.normalizer.clean_counterparty(' '.join(kept))

    def find_brand(self, body: str) -> Optional[str]:
        """Label of the first mobile-money brand mentioned, if any"""
        if not body:
            return None
        for label, pattern in self.brand_patterns:
            if pattern.search(body):
                return label
        return None

    def has_provider_vocabulary(self, body: str, counterparty: Optional[str] = None) -> bool:
        """Brand token, generic bank token, or a counterparty that names one"""
        if self.find_brand(body) or BANK_TOKEN_PATTERN.search(body or ''):
            return True
        if counterparty:
            return bool(self.find_brand(counterparty) or BANK_TOKEN_PATTERN.search(counterparty))
        return False

    def detect_provider(self, body: str) -> str:
        """Map the message to a known provider, specific banks before generic"""
        for label, pattern in self.provider_patterns:
            if pattern.search(body or ''):
                return label
        return 'Other'

    def detect_category(self, body: str, direction: Optional[Direction]) -> str:
        """Tag a spending or income category from keywords"""
        if direction == Direction.DEBIT:
            families = self.debit_categories
        elif direction == Direction.CREDIT:
            families = self.credit_categories
        else:
            return 'Other'

        for label, pattern in families:
            if pattern.search(body or ''):
                return label
        return 'Other'
