"""
Tests for the standalone yield calculator.

Tests the calculator package without database dependencies.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from calculator import (
    YieldCalculator,
    format_currency,
    format_money,
    format_percentage,
    quantize_money,
)


class TestYieldCalculator:
    """Tests for YieldCalculator class."""

    @pytest.fixture
    def calc(self) -> YieldCalculator:
        """Create calculator instance."""
        return YieldCalculator()

    # === Profit and payout ===

    def test_profit_at_base_rate(self, calc: YieldCalculator) -> None:
        """10% of 100 is 10."""
        assert calc.calculate_profit(Decimal("100"), Decimal("10")) == Decimal("10.000000")

    def test_payout_at_thirteen_percent(self, calc: YieldCalculator) -> None:
        """$100 at 13% pays out 113.000000."""
        assert calc.calculate_payout(Decimal("100"), Decimal("13")) == Decimal("113.000000")

    def test_profit_rounds_half_up_to_six_places(self, calc: YieldCalculator) -> None:
        """Sub-micro amounts round half up."""
        result = calc.calculate_profit(Decimal("0.0000125"), Decimal("10"))
        assert result == Decimal("0.000001")

    def test_profit_zero_amount(self, calc: YieldCalculator) -> None:
        """Zero principal earns nothing."""
        assert calc.calculate_profit(Decimal("0"), Decimal("13")) == Decimal("0")

    def test_settle_breakdown(self, calc: YieldCalculator) -> None:
        """settle() returns principal, profit and payout that add up."""
        breakdown = calc.settle(Decimal("250.5"), Decimal("11"))

        assert breakdown.principal == Decimal("250.500000")
        assert breakdown.profit == Decimal("27.555000")
        assert breakdown.payout == breakdown.principal + breakdown.profit

    def test_settle_details_are_strings(self, calc: YieldCalculator) -> None:
        """Audit details render money as fixed strings."""
        details = calc.settle(Decimal("100"), Decimal("13")).as_details()

        assert details["payout"] == "113.000000"
        assert details["profit"] == "13.000000"

    # === Maturity ===

    def test_maturity_is_72_hours(self, calc: YieldCalculator) -> None:
        """Default term is 72 hours."""
        start = datetime(2026, 1, 1, tzinfo=UTC)
        assert calc.calculate_maturity(start) == start + timedelta(hours=72)

    def test_is_matured_boundary(self, calc: YieldCalculator) -> None:
        """An investment is matured exactly at matures_at."""
        moment = datetime(2026, 1, 4, tzinfo=UTC)
        assert calc.is_matured(moment, moment) is True
        assert calc.is_matured(moment, moment - timedelta(seconds=1)) is False

    def test_invalid_term_rejected(self) -> None:
        """Term must be positive."""
        with pytest.raises(ValueError):
            YieldCalculator(term_hours=0)

    def test_build_terms_snapshots_rate(self, calc: YieldCalculator) -> None:
        """Terms carry quantized amount and rate."""
        start = datetime(2026, 1, 1, tzinfo=UTC)
        terms = calc.build_terms(Decimal("60"), 11, start)

        assert terms.amount == Decimal("60.000000")
        assert terms.rate_percent == Decimal("11.00")
        assert terms.matures_at == start + timedelta(hours=72)

    # === Referral share ===

    def test_referral_share_top_tier(self, calc: YieldCalculator) -> None:
        """Tier 13 earns 3% of principal."""
        assert calc.calculate_referral_share(Decimal("100"), 13) == Decimal("3.000000")

    def test_referral_share_base_tier_is_zero(self, calc: YieldCalculator) -> None:
        """No spread, no share."""
        assert calc.calculate_referral_share(Decimal("100"), 10) == Decimal("0")


class TestFormatters:
    """Tests for formatting helpers."""

    def test_quantize_money(self) -> None:
        assert quantize_money("1.2345675") == Decimal("1.234568")

    def test_format_money(self) -> None:
        assert format_money(Decimal("113")) == "113.000000"
        assert format_money(None) == "0.000000"

    def test_format_currency(self) -> None:
        assert format_currency(Decimal("1234.5")) == "1,234.50 USDT"
        assert format_currency(Decimal("5"), currency="$") == "$5.00"

    def test_format_percentage(self) -> None:
        assert format_percentage(Decimal("12.5")) == "12.50%"
        assert format_percentage(3, decimals=0, show_sign=True) == "+3%"
