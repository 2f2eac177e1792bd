"""
Cancellation refund policy

Binary rule: cancelling more than the notice threshold before the scheduled
date refunds everything, anything later (including after the date) refunds
half. There is no graduated scale.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from storefront.utils.dates import DateLike, hours_until

FULL_REFUND_PERCENT = 100
LATE_REFUND_PERCENT = 50


@dataclass(frozen=True)
class RefundDecision:
    amount: Decimal
    percentage: int
    reason: str
    hours_until_scheduled: float

    def to_dict(self):
        return {
            'amount': float(self.amount),
            'percentage': self.percentage,
            'reason': self.reason,
            'hoursUntilScheduled': round(self.hours_until_scheduled, 2),
        }


class RefundPolicy:
    """Refund calculator for tour and space cancellations"""

    @staticmethod
    def decide(hours_until_scheduled: float, amount_paid, notice_threshold_hours: int) -> RefundDecision:
        """Apply the rule to an already computed notice (hours)"""
        amount_paid = Decimal(str(amount_paid))
        if amount_paid < 0:
            raise ValueError("amount_paid must not be negative")
        if notice_threshold_hours < 0:
            raise ValueError("notice_threshold_hours must not be negative")

        if hours_until_scheduled > notice_threshold_hours:
            return RefundDecision(
                amount=amount_paid,
                percentage=FULL_REFUND_PERCENT,
                reason="full refund (early cancellation)",
                hours_until_scheduled=hours_until_scheduled,
            )

        return RefundDecision(
            amount=amount_paid * LATE_REFUND_PERCENT / 100,
            percentage=LATE_REFUND_PERCENT,
            reason=f"50% refund (cancellation within {notice_threshold_hours}h notice window)",
            hours_until_scheduled=hours_until_scheduled,
        )

    @staticmethod
    def compute_refund(
        scheduled_date: DateLike,
        amount_paid,
        notice_threshold_hours: int,
        now: Optional[datetime] = None
    ) -> RefundDecision:
        """
        Refund owed when a confirmed booking is cancelled now.

        Args:
            scheduled_date: Calendar date of the tour/space booking, read as local midnight
            amount_paid: Amount charged at checkout
            notice_threshold_hours: Admin configured notice window
            now: Current local time, defaults to the wall clock

        Raises:
            InvalidDateError: If scheduled_date is malformed
        """
        return RefundPolicy.decide(
            hours_until(scheduled_date, now=now),
            amount_paid,
            notice_threshold_hours,
        )
