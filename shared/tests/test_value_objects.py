"""Tests for shared value objects."""

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.value_objects import DateRange, Money


class TestMoney:
    def test_amount_is_coerced_to_decimal(self):
        money = Money(150.5)

        assert money.amount == Decimal('150.50')
        assert money.currency == 'usd'

    @pytest.mark.parametrize(
        'amount, cents',
        [
            (Decimal('150.50'), 15050),
            (Decimal('0'), 0),
            (Decimal('19.999'), 2000),
            (Decimal('0.005'), 1),
            (Decimal('0.004'), 0),
        ],
    )
    def test_to_minor_units(self, amount, cents):
        assert Money(amount).to_minor_units() == cents

    def test_amount_is_rounded_half_up_to_cents(self):
        money = Money(Decimal('150.505'))

        assert money.amount == Decimal('150.51')
        assert money.to_minor_units() == 15051

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValueError):
            Money(Decimal('-0.01'))


class TestDateRange:
    def test_length_in_days(self):
        assert len(DateRange(date(2024, 6, 1), date(2024, 6, 4))) == 3

    def test_end_must_follow_start(self):
        with pytest.raises(ValueError):
            DateRange(date(2024, 6, 4), date(2024, 6, 4))

