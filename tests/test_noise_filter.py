"""Tests for the noise filter chain."""

import pytest

from momo_parser.parsers.noise_filter import NoiseFilterChain
from momo_parser.utils.error_handler import RejectionReason


class TestNoiseFilterChain:
    """Test cases for NoiseFilterChain"""

    def setup_method(self):
        """Set up test fixtures"""
        self.chain = NoiseFilterChain()

    @pytest.mark.parametrize("body, reason", [
        ("Failed. Insufficient funds in your M-PESA account to send Ksh 500.00.",
         RejectionReason.FAILED_TRANSACTION),
        ("Your transfer of KES 1,000 was not successful. Please try again.",
         RejectionReason.FAILED_TRANSACTION),
        ("You have received Okoa Jahazi airtime of Ksh 20. Repay Ksh 22 by 12/10.",
         RejectionReason.NON_TRANSACTIONAL_PRODUCT),
        ("You have received 50MB data valid for the next hour.",
         RejectionReason.DATA_BUNDLE),
        ("Congratulations! You have an airtime reward of Ksh 10.",
         RejectionReason.DATA_BUNDLE),
        ("Your M-Shwari account balance is Ksh 1,200.00. Interest earned Ksh 3.40.",
         RejectionReason.SAVINGS_STATEMENT),
        ("Your balance request was processed. SMS costs Ksh 1.00.",
         RejectionReason.SMS_COST_NOTICE),
        ("Mini Statement: [12/09 Sent Ksh 100.00] [13/09 Received Ksh 250.00] Transaction cost Ksh 0.00",
         RejectionReason.MINI_STATEMENT),
        ("Enjoy a special offer on all bundles this weekend",
         RejectionReason.PROMOTION),
        ("Get a free gift now! Reply WIN to 4040.",
         RejectionReason.PROMOTION),
        ("Your weekly bundle expires today at midnight.",
         RejectionReason.EXPIRY_REMINDER),
        ("Download the app now to manage your account.",
         RejectionReason.CALL_TO_ACTION),
        ("Weekly tips from your provider. STOP TO 456",
         RejectionReason.OPT_OUT),
    ])
    def test_rejects_noise(self, body, reason):
        """Each predicate category rejects a literal noise message"""
        assert self.chain.first_match(body) == reason
        assert self.chain.should_reject(body)

    def test_genuine_receipt_passes(self):
        """A real receipt is not rejected"""
        body = "ABC123 confirmed. You have received Ksh 1,250.00 from John Doe Ref ABC123 on 12/09/2025"
        assert self.chain.first_match(body) is None
        assert not self.chain.should_reject(body)

    def test_promotion_guard_keeps_real_receipt(self):
        """Marketing copy appended to a real receipt does not reject it"""
        body = ("QWE12345RT Confirmed. You have received Ksh 500.00 from Mary Wanjiku. "
                "Earn a bonus when you save.")
        assert not self.chain.is_promotion(body)
        assert not self.chain.should_reject(body)

    def test_call_to_action_guard_keeps_real_receipt(self):
        """A call to action after a real payment does not reject it"""
        body = "You have paid Ksh 200.00 to Java House. Download our app now."
        assert not self.chain.is_call_to_action(body)
        assert not self.chain.should_reject(body)

    def test_guard_requires_currency_amount(self):
        """Transaction vocabulary without a currency amount is not enough"""
        body = "You have received a gift from us"
        assert not self.chain.looks_like_transaction(body)
        assert self.chain.is_promotion(body)

    def test_mini_statement_needs_transaction_cost(self):
        """Bracketed segments alone are not a mini statement"""
        body = "Sent [Ksh 100.00] to [John] Ref AB12"
        assert not self.chain.is_mini_statement(body)

    def test_single_bracket_is_not_mini_statement(self):
        body = "Ksh 100.00 sent to John [note]. Transaction cost Ksh 0.00"
        assert not self.chain.is_mini_statement(body)

    def test_predicates_run_in_fixed_order(self):
        """Earlier predicates decide the reason when several match"""
        body = "Failed: your special offer expires today. STOP TO 456"
        assert self.chain.first_match(body) == RejectionReason.FAILED_TRANSACTION
