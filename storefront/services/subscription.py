import logging
from datetime import date, timedelta
from typing import Dict

from storefront.extensions import db
from storefront.models.enums import MembershipTier
from storefront.services.membership import MembershipConfig, get_tier_config
from storefront.services.notification import NotificationService

logger = logging.getLogger(__name__)


class SubscriptionError(Exception):
    """Raised when a membership change is not allowed"""
    pass


class SubscriptionManager:
    """Handle membership subscriptions and monthly usage counters"""

    @staticmethod
    def activate_subscription(user, tier: MembershipTier, config: MembershipConfig, duration_months: int = 1):
        """Activate or change plan; usage counters restart with the new plan"""
        if get_tier_config(config, tier) is None:
            raise SubscriptionError(f"Tier {tier.value} is not available")

        user.membership_tier = tier
        user.membership_valid_until = date.today() + timedelta(days=30 * duration_months)
        user.used_km_this_month = 0
        user.space_bookings_this_month = 0
        user.usage_period = (user.usage_period or 0) + 1
        user.membership_cancellation_reason = None

        NotificationService.create_notification(
            NotificationService.membership_activated(user.id, tier)
        )
        db.session.commit()

        logger.info(f"User {user.id} activated plan {tier.value}")
        return user

    @staticmethod
    def cancel_subscription(user, reason: str = None):
        if not user.is_member():
            raise SubscriptionError("No active membership to cancel")

        user.membership_tier = MembershipTier.NONE
        user.membership_valid_until = None
        user.used_km_this_month = 0
        user.space_bookings_this_month = 0
        user.usage_period = (user.usage_period or 0) + 1
        user.membership_cancellation_reason = reason
        db.session.commit()

        logger.info(f"User {user.id} cancelled membership")
        return user

    @staticmethod
    def usage_summary(user, config: MembershipConfig) -> Dict:
        """Quota usage shown on the profile screen"""
        tier_config = get_tier_config(config, user.membership_tier)
        used_km = user.used_km_this_month or 0
        used_spaces = user.space_bookings_this_month or 0

        if tier_config is None:
            return {
                'tier': MembershipTier.NONE.value,
                'kmLimit': 0,
                'usedThisMonth': used_km,
                'remainingKm': 0,
                'spaceBookingsThisMonth': used_spaces,
                'spaceUsesRemaining': 0,
            }

        limit = tier_config.space_benefit.monthly_use_limit
        return {
            'tier': tier_config.tier.value,
            'kmLimit': tier_config.km_limit,
            'usedThisMonth': used_km,
            'remainingKm': tier_config.km_limit - used_km,
            'spaceBookingsThisMonth': used_spaces,
            'spaceUsesRemaining': max(0, limit - used_spaces),
        }

    @staticmethod
    def reset_monthly_counters():
        """Reset monthly usage counters (run as scheduled task)"""
        from storefront.models import User

        updated = User.query.filter(
            User.membership_tier != MembershipTier.NONE
        ).update(
            {
                'used_km_this_month': 0,
                'space_bookings_this_month': 0,
                'usage_period': User.usage_period + 1,
                'version': User.version + 1,
            },
            synchronize_session=False
        )

        db.session.commit()
        logger.info(f"Reset monthly usage for {updated} members")
        return updated
