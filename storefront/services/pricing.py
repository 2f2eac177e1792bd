"""
Pricing engine

Pure calculators: they read a bookable item, a member snapshot and a
membership config snapshot, and return an itemized breakdown. Nothing here
touches the database or mutates its inputs.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from storefront.models.enums import MembershipTier
from storefront.services.membership import (
    ANONYMOUS,
    AnonymousMember,
    MembershipConfig,
    Member,
    get_tier_config,
)

ZERO = Decimal('0')
HUNDRED = Decimal('100')

# Display split when a tour has no price at all
DEFAULT_LOGISTICS_SHARE = Decimal('80')
DEFAULT_TICKET_SHARE = Decimal('20')

NO_BENEFITS_REASON = "not a member or plan has no benefits"


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class BookableTour:
    logistics_cost: Decimal
    service_fee: Decimal
    km: int = 0

    def __post_init__(self):
        if self.logistics_cost < 0 or self.service_fee < 0:
            raise ValueError("Tour prices must not be negative")
        if self.km < 0:
            raise ValueError("Tour km must not be negative")

    @classmethod
    def from_model(cls, tour) -> 'BookableTour':
        """
        Build from a Tour row. Tours without an explicit component split are
        priced as 80% logistics / 20% ticket of their list price.
        """
        price = _money(getattr(tour, 'price', None))
        logistics = getattr(tour, 'price_logistics', None)
        ticket = getattr(tour, 'price_ticket', None)
        return cls(
            logistics_cost=_money(logistics) if logistics is not None else price * Decimal('0.8'),
            service_fee=_money(ticket) if ticket is not None else price * Decimal('0.2'),
            km=int(tour.km or 0),
        )


@dataclass(frozen=True)
class BookableSpace:
    price: Decimal

    def __post_init__(self):
        if self.price < 0:
            raise ValueError("Space price must not be negative")

    @classmethod
    def from_model(cls, space) -> 'BookableSpace':
        return cls(price=_money(space.price))


@dataclass(frozen=True)
class TourCostBreakdown:
    base_price: Decimal
    logistics_cost: Decimal
    service_fee: Decimal
    discount_amount: Decimal
    final_service_fee: Decimal
    final_total: Decimal
    is_discount_applied: bool
    member_tier: MembershipTier
    discount_fraction: Decimal
    logistics_percentage: Decimal
    ticket_percentage: Decimal
    reason: str
    remaining_quota: Optional[int] = None
    km_consumed: int = 0

    def to_dict(self):
        return {
            'basePrice': float(self.base_price),
            'logisticsCost': float(self.logistics_cost),
            'serviceFee': float(self.service_fee),
            'discountAmount': float(self.discount_amount),
            'finalServiceFee': float(self.final_service_fee),
            'finalTotal': float(self.final_total),
            'isDiscountApplied': self.is_discount_applied,
            'memberTier': self.member_tier.value,
            'discountFraction': float(self.discount_fraction),
            'logisticsPercentage': float(self.logistics_percentage),
            'ticketPercentage': float(self.ticket_percentage),
            'remainingQuota': self.remaining_quota,
            'kmConsumed': self.km_consumed,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class SpaceCostBreakdown:
    original_price: Decimal
    discount_amount: Decimal
    final_price: Decimal
    is_discount_applied: bool
    member_tier: MembershipTier
    discount_fraction: Decimal
    remaining_uses: int
    decoration_perk: Optional[str]
    reason: str

    def to_dict(self):
        return {
            'originalPrice': float(self.original_price),
            'discountAmount': float(self.discount_amount),
            'finalPrice': float(self.final_price),
            'isDiscountApplied': self.is_discount_applied,
            'memberTier': self.member_tier.value,
            'discountFraction': float(self.discount_fraction),
            'remainingUses': self.remaining_uses,
            'decorationPerk': self.decoration_perk,
            'reason': self.reason,
        }


class PricingCalculator:
    """Membership-aware cost breakdowns for tours and spaces"""

    @staticmethod
    def compute_tour_breakdown(
        tour: BookableTour,
        member: Optional[Member],
        config: MembershipConfig
    ) -> TourCostBreakdown:
        """
        Itemize a tour price for a member.

        The tier discount applies to the service fee only, and only when the
        whole trip fits in what is left of the member's monthly km quota.
        A trip that does not fit gets no discount at all.
        """
        if member is None:
            member = ANONYMOUS

        logistics_cost = tour.logistics_cost
        service_fee = tour.service_fee
        base_price = logistics_cost + service_fee

        discount_amount = ZERO
        discount_fraction = ZERO
        is_discount_applied = False
        remaining_quota = None
        km_consumed = 0
        member_tier = member.tier

        tier_config = None
        if not isinstance(member, AnonymousMember):
            tier_config = get_tier_config(config, member.tier)

        if tier_config is None:
            member_tier = MembershipTier.NONE
            reason = NO_BENEFITS_REASON
        else:
            # Negative when the member is already over quota
            remaining_quota = tier_config.km_limit - member.used_this_month

            if tour.km <= remaining_quota:
                discount_fraction = tier_config.discount_fraction
                discount_amount = service_fee * discount_fraction
                is_discount_applied = True
                km_consumed = tour.km
                reason = f"covered by monthly quota ({remaining_quota} km available)"
            else:
                reason = f"exceeds your available monthly quota ({remaining_quota} km remaining)"

        final_service_fee = service_fee - discount_amount
        final_total = logistics_cost + final_service_fee

        if base_price > 0:
            logistics_percentage = logistics_cost / base_price * HUNDRED
            ticket_percentage = service_fee / base_price * HUNDRED
        else:
            logistics_percentage = DEFAULT_LOGISTICS_SHARE
            ticket_percentage = DEFAULT_TICKET_SHARE

        return TourCostBreakdown(
            base_price=base_price,
            logistics_cost=logistics_cost,
            service_fee=service_fee,
            discount_amount=discount_amount,
            final_service_fee=final_service_fee,
            final_total=final_total,
            is_discount_applied=is_discount_applied,
            member_tier=member_tier,
            discount_fraction=discount_fraction,
            logistics_percentage=logistics_percentage,
            ticket_percentage=ticket_percentage,
            reason=reason,
            remaining_quota=remaining_quota,
            km_consumed=km_consumed,
        )

    @staticmethod
    def compute_space_breakdown(
        space: BookableSpace,
        member: Optional[Member],
        config: MembershipConfig
    ) -> SpaceCostBreakdown:
        """
        Itemize a space rental for a member.

        Eligibility is count based: the discount applies while the member has
        used fewer discounted bookings this month than the tier allows. The
        decoration perk is reported independently of any price discount.
        """
        if member is None:
            member = ANONYMOUS

        original_price = space.price
        discount_amount = ZERO
        discount_fraction = ZERO
        is_discount_applied = False
        remaining_uses = 0
        decoration_perk = None
        member_tier = member.tier

        tier_config = None
        if not isinstance(member, AnonymousMember):
            tier_config = get_tier_config(config, member.tier)

        if tier_config is None:
            member_tier = MembershipTier.NONE
            reason = NO_BENEFITS_REASON
        else:
            benefit = tier_config.space_benefit
            used = member.space_bookings_this_month
            limit = benefit.monthly_use_limit
            remaining_uses = max(0, limit - used)
            decoration_perk = benefit.decoration_label

            if used < limit and benefit.discount_fraction > 0:
                discount_fraction = benefit.discount_fraction
                discount_amount = original_price * discount_fraction
                is_discount_applied = True
                reason = f"member discount ({remaining_uses} uses left this month)"
            elif limit == 0 or benefit.discount_fraction == 0:
                reason = "plan has no space discount"
            else:
                reason = f"monthly space benefit used up ({used} of {limit} uses)"

        return SpaceCostBreakdown(
            original_price=original_price,
            discount_amount=discount_amount,
            final_price=original_price - discount_amount,
            is_discount_applied=is_discount_applied,
            member_tier=member_tier,
            discount_fraction=discount_fraction,
            remaining_uses=remaining_uses,
            decoration_perk=decoration_perk,
            reason=reason,
        )

    @staticmethod
    def calculate_tour_price(
        tour: BookableTour,
        member: Optional[Member],
        config: MembershipConfig
    ) -> Tuple[Decimal, bool]:
        """Return (final_price, discount_applied)"""
        breakdown = PricingCalculator.compute_tour_breakdown(tour, member, config)
        return breakdown.final_total, breakdown.discount_amount > 0

    @staticmethod
    def total_for_party(breakdown: TourCostBreakdown, pax: int) -> Decimal:
        """Checkout amount for a group, every traveller pays the member price"""
        if pax < 1:
            raise ValueError("pax must be at least 1")
        return breakdown.final_total * pax
