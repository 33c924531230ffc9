from datetime import date
from decimal import Decimal

import pytest

from app.domain.value_objects.invoice_number import InvoiceNumber
from app.domain.value_objects.money import Money
from app.domain.value_objects.stay_period import StayPeriod


class TestStayPeriod:
    def test_nights_is_day_difference(self):
        period = StayPeriod(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        assert period.nights == 2

    def test_single_night(self):
        period = StayPeriod(check_in=date(2024, 1, 1), check_out=date(2024, 1, 2))
        assert period.nights == 1

    @pytest.mark.parametrize(
        "check_in, check_out",
        [
            (date(2024, 1, 3), date(2024, 1, 1)),
            (date(2024, 1, 1), date(2024, 1, 1)),
        ],
    )
    def test_rejects_empty_or_inverted_interval(self, check_in, check_out):
        with pytest.raises(ValueError):
            StayPeriod(check_in=check_in, check_out=check_out)

    def test_back_to_back_stays_do_not_overlap(self):
        first = StayPeriod(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        second = StayPeriod(check_in=date(2024, 1, 3), check_out=date(2024, 1, 5))
        assert not first.overlaps(second.check_in, second.check_out)
        assert not second.overlaps(first.check_in, first.check_out)

    def test_partial_overlap(self):
        first = StayPeriod(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        assert first.overlaps(date(2024, 1, 2), date(2024, 1, 4))

    def test_spans_day_excludes_check_out(self):
        period = StayPeriod(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        assert period.spans_day(date(2024, 1, 1))
        assert period.spans_day(date(2024, 1, 2))
        assert not period.spans_day(date(2024, 1, 3))

    def test_check_in_window(self):
        period = StayPeriod(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        assert period.check_in_window(1) == (date(2023, 12, 31), date(2024, 1, 3))


class TestMoney:
    def test_quantizes_to_cents(self):
        assert Money(amount=Decimal("10.005"), currency_code="BDT").amount == Decimal("10.01")

    def test_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Money(amount=Decimal("-1"), currency_code="BDT")

    def test_rejects_mixed_currencies(self):
        with pytest.raises(ValueError):
            Money(amount=Decimal("1"), currency_code="BDT") + Money(amount=Decimal("1"), currency_code="USD")

    def test_multiplies_by_nights(self):
        rate = Money(amount=Decimal("100"), currency_code="BDT")
        assert (rate * 2).amount == Decimal("200.00")

    def test_sum(self):
        total = Money.sum(
            [Money(amount=Decimal("200"), currency_code="BDT"), Money(amount=Decimal("150"), currency_code="BDT")],
            "BDT",
        )
        assert total == Money(amount=Decimal("350"), currency_code="BDT")


class TestInvoiceNumber:
    def test_generated_number_matches_format(self):
        number = InvoiceNumber.generate(date(2024, 1, 15))
        assert number.value.startswith("INV-20240115-")
        assert InvoiceNumber.PATTERN.match(number.value)

    def test_rejects_malformed_number(self):
        with pytest.raises(ValueError):
            InvoiceNumber("INV-2024-1")
