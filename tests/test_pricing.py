import copy
import pytest
from decimal import Decimal
from types import SimpleNamespace

from storefront.models.enums import MembershipTier
from storefront.services.membership import (
    ANONYMOUS,
    DEFAULT_MEMBERSHIP_TIERS,
    EnrolledMember,
    build_membership_config,
)
from storefront.services.pricing import (
    BookableSpace,
    BookableTour,
    PricingCalculator,
)

IGUAZU = BookableTour(logistics_cost=Decimal('80000'), service_fee=Decimal('25000'), km=900)


def plus_member(used_km=0, space_uses=0):
    return EnrolledMember(MembershipTier.PLUS, used_this_month=used_km, space_bookings_this_month=space_uses)


class TestTourBreakdown:

    def test_quota_exceeded_denies_discount(self, membership_config):
        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(2200), membership_config)

        assert breakdown.remaining_quota == 800
        assert breakdown.is_discount_applied is False
        assert breakdown.discount_amount == 0
        assert breakdown.final_total == Decimal('105000')
        assert breakdown.km_consumed == 0
        assert breakdown.reason == "exceeds your available monthly quota (800 km remaining)"

    def test_quota_available_grants_discount(self, membership_config):
        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(2000), membership_config)

        assert breakdown.remaining_quota == 1000
        assert breakdown.is_discount_applied is True
        assert breakdown.discount_amount == Decimal('6250')
        assert breakdown.final_service_fee == Decimal('18750')
        assert breakdown.final_total == Decimal('98750')
        assert breakdown.km_consumed == 900
        assert breakdown.member_tier == MembershipTier.PLUS
        assert breakdown.reason == "covered by monthly quota (1000 km available)"

    def test_quota_boundary_is_inclusive(self, membership_config):
        exact = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(2100), membership_config)
        over = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(2101), membership_config)

        assert exact.remaining_quota == 900
        assert exact.is_discount_applied is True
        assert over.remaining_quota == 899
        assert over.is_discount_applied is False

    def test_member_already_over_quota(self, membership_config):
        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(3500), membership_config)

        assert breakdown.remaining_quota == -500
        assert breakdown.is_discount_applied is False
        assert "(-500 km remaining)" in breakdown.reason

    def test_zero_km_tour_with_negative_quota_is_denied(self, membership_config):
        tour = BookableTour(Decimal('1000'), Decimal('500'), km=0)
        breakdown = PricingCalculator.compute_tour_breakdown(tour, plus_member(3001), membership_config)
        assert breakdown.is_discount_applied is False

    @pytest.mark.parametrize('member', [None, ANONYMOUS])
    def test_non_member_pays_base_price(self, membership_config, member):
        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, member, membership_config)

        assert breakdown.discount_amount == 0
        assert breakdown.final_total == breakdown.base_price == Decimal('105000')
        assert breakdown.member_tier == MembershipTier.NONE
        assert breakdown.remaining_quota is None
        assert breakdown.reason == "not a member or plan has no benefits"

    def test_tier_missing_from_table_gets_no_benefits(self):
        tiers = copy.deepcopy(DEFAULT_MEMBERSHIP_TIERS)
        del tiers['PLUS']
        config = build_membership_config(tiers)

        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(0), config)

        assert breakdown.is_discount_applied is False
        assert breakdown.reason == "not a member or plan has no benefits"

    @pytest.mark.parametrize('used_km', [0, 500, 2100, 2101, 2999, 3000, 5000])
    def test_discount_is_all_or_nothing_and_spares_logistics(self, membership_config, used_km):
        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(used_km), membership_config)

        assert breakdown.discount_amount in (Decimal('0'), IGUAZU.service_fee * Decimal('0.25'))
        assert breakdown.final_total - breakdown.final_service_fee == IGUAZU.logistics_cost
        assert breakdown.final_total >= IGUAZU.logistics_cost

    def test_display_percentages(self, membership_config):
        tour = BookableTour(Decimal('75000'), Decimal('25000'), km=10)
        breakdown = PricingCalculator.compute_tour_breakdown(tour, None, membership_config)

        assert breakdown.logistics_percentage == Decimal('75')
        assert breakdown.ticket_percentage == Decimal('25')

    def test_free_tour_uses_default_display_split(self, membership_config):
        tour = BookableTour(Decimal('0'), Decimal('0'), km=0)
        breakdown = PricingCalculator.compute_tour_breakdown(tour, plus_member(0), membership_config)

        assert breakdown.logistics_percentage == Decimal('80')
        assert breakdown.ticket_percentage == Decimal('20')
        assert breakdown.final_total == 0

    def test_calculate_tour_price(self, membership_config):
        assert PricingCalculator.calculate_tour_price(IGUAZU, plus_member(0), membership_config) == (
            Decimal('98750'), True
        )
        assert PricingCalculator.calculate_tour_price(IGUAZU, None, membership_config) == (
            Decimal('105000'), False
        )

    def test_total_for_party(self, membership_config):
        breakdown = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(0), membership_config)
        assert PricingCalculator.total_for_party(breakdown, 3) == Decimal('296250')
        with pytest.raises(ValueError):
            PricingCalculator.total_for_party(breakdown, 0)

    def test_to_dict(self, membership_config):
        data = PricingCalculator.compute_tour_breakdown(IGUAZU, plus_member(2000), membership_config).to_dict()

        assert data['finalTotal'] == 98750.0
        assert data['memberTier'] == 'PLUS'
        assert data['isDiscountApplied'] is True


class TestBookableTour:

    def test_from_model_with_component_prices(self):
        tour = SimpleNamespace(price=Decimal('105000'), price_logistics=Decimal('80000'),
                               price_ticket=Decimal('25000'), km=900)
        assert BookableTour.from_model(tour) == IGUAZU

    def test_from_model_without_split_uses_list_price(self):
        tour = SimpleNamespace(price=Decimal('100000'), price_logistics=None, price_ticket=None, km=100)
        bookable = BookableTour.from_model(tour)

        assert bookable.logistics_cost == Decimal('80000')
        assert bookable.service_fee == Decimal('20000')

    def test_negative_values_are_rejected(self):
        with pytest.raises(ValueError):
            BookableTour(Decimal('-1'), Decimal('100'), km=10)
        with pytest.raises(ValueError):
            BookableTour(Decimal('1'), Decimal('100'), km=-10)
        with pytest.raises(ValueError):
            BookableSpace(Decimal('-100'))


class TestSpaceBreakdown:

    SALON = BookableSpace(price=Decimal('60000'))

    def test_plus_member_gets_discount_and_decoration(self, membership_config):
        breakdown = PricingCalculator.compute_space_breakdown(self.SALON, plus_member(space_uses=0), membership_config)

        assert breakdown.is_discount_applied is True
        assert breakdown.discount_amount == Decimal('9000')
        assert breakdown.final_price == Decimal('51000')
        assert breakdown.remaining_uses == 2
        assert breakdown.decoration_perk == 'Decoración Básica'

    def test_use_limit_exhausted(self, membership_config):
        breakdown = PricingCalculator.compute_space_breakdown(self.SALON, plus_member(space_uses=2), membership_config)

        assert breakdown.is_discount_applied is False
        assert breakdown.final_price == breakdown.original_price == Decimal('60000')
        assert breakdown.remaining_uses == 0
        assert breakdown.decoration_perk == 'Decoración Básica'
        assert breakdown.reason == "monthly space benefit used up (2 of 2 uses)"

    def test_remaining_uses_never_negative(self, membership_config):
        breakdown = PricingCalculator.compute_space_breakdown(self.SALON, plus_member(space_uses=5), membership_config)
        assert breakdown.remaining_uses == 0

    def test_entry_tier_never_qualifies(self, membership_config):
        member = EnrolledMember(MembershipTier.BASICO, space_bookings_this_month=0)
        breakdown = PricingCalculator.compute_space_breakdown(self.SALON, member, membership_config)

        assert breakdown.is_discount_applied is False
        assert breakdown.remaining_uses == 0
        assert breakdown.final_price == Decimal('60000')
        assert breakdown.decoration_perk is None

    def test_decoration_without_price_discount(self):
        tiers = copy.deepcopy(DEFAULT_MEMBERSHIP_TIERS)
        tiers['ELITE']['spaceConfig'] = {'discount': 0, 'limit': 3, 'decoration': 'Decoración Premium'}
        config = build_membership_config(tiers)
        member = EnrolledMember(MembershipTier.ELITE, space_bookings_this_month=1)

        breakdown = PricingCalculator.compute_space_breakdown(self.SALON, member, config)

        assert breakdown.is_discount_applied is False
        assert breakdown.final_price == Decimal('60000')
        assert breakdown.remaining_uses == 2
        assert breakdown.decoration_perk == 'Decoración Premium'

    def test_anonymous_visitor(self, membership_config):
        breakdown = PricingCalculator.compute_space_breakdown(self.SALON, None, membership_config)

        assert breakdown.member_tier == MembershipTier.NONE
        assert breakdown.final_price == Decimal('60000')
        assert breakdown.remaining_uses == 0
        assert breakdown.decoration_perk is None
