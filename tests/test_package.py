"""Tests for the top-level package surface"""

import momo_parser
from momo_parser import Direction, SmsParser, __version__


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    for name in momo_parser.__all__:
        assert hasattr(momo_parser, name), name


def test_parser_from_package_root():
    records = SmsParser().parse_text("Ksh 75.00 sent to Jane Ref PK7788 via M-PESA")
    assert records[0].direction == Direction.DEBIT
