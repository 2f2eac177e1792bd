import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from storefront.services.refund import RefundPolicy
from storefront.utils.dates import InvalidDateError, local_midnight

SCHEDULED = date(2026, 12, 10)


def now_hours_before(hours):
    return local_midnight(SCHEDULED) - timedelta(hours=hours)


class TestRefundPolicy:

    def test_early_cancellation_full_refund(self):
        decision = RefundPolicy.compute_refund(SCHEDULED, 100000, 72, now=now_hours_before(73))

        assert decision.percentage == 100
        assert decision.amount == Decimal('100000')
        assert decision.reason == "full refund (early cancellation)"

    def test_threshold_itself_is_late(self):
        decision = RefundPolicy.compute_refund(SCHEDULED, 100000, 72, now=now_hours_before(72))

        assert decision.percentage == 50
        assert decision.amount == Decimal('50000')
        assert decision.reason == "50% refund (cancellation within 72h notice window)"

    def test_past_due_is_half_refund(self):
        decision = RefundPolicy.compute_refund(SCHEDULED, 100000, 72, now=now_hours_before(-5))

        assert decision.hours_until_scheduled == -5
        assert decision.percentage == 50
        assert decision.amount == Decimal('50000')

    @pytest.mark.parametrize('hours', [1, 24, 71])
    def test_no_graduated_scale(self, hours):
        decision = RefundPolicy.compute_refund(SCHEDULED, 100000, 72, now=now_hours_before(hours))
        assert decision.percentage == 50

    def test_accepts_iso_string_as_local_date(self):
        decision = RefundPolicy.compute_refund('2026-12-10', Decimal('80000'), 48,
                                               now=datetime(2026, 12, 7, 23, 0))
        assert decision.hours_until_scheduled == 49
        assert decision.percentage == 100

    def test_custom_threshold_in_reason(self):
        decision = RefundPolicy.compute_refund(SCHEDULED, 1000, 24, now=now_hours_before(3))
        assert "24h" in decision.reason

    def test_malformed_date_raises(self):
        with pytest.raises(InvalidDateError):
            RefundPolicy.compute_refund('10/12/2026', 1000, 72)

    def test_negative_amount_raises(self):
        with pytest.raises(ValueError):
            RefundPolicy.compute_refund(SCHEDULED, -1, 72, now=now_hours_before(100))

    def test_decide_from_hours(self):
        decision = RefundPolicy.decide(73, Decimal('100000'), 72)
        assert decision.to_dict() == {
            'amount': 100000.0,
            'percentage': 100,
            'reason': 'full refund (early cancellation)',
            'hoursUntilScheduled': 73,
        }
