from flask import request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from storefront.api.membership import membership_bp
from storefront.models import User
from storefront.models.enums import MembershipTier
from storefront.services.settings import load_membership_config
from storefront.services.subscription import SubscriptionManager
from storefront.utils.api_response import APIResponse
from storefront.utils.decorators import handle_service_error


@membership_bp.route('/tiers', methods=['GET'])
@handle_service_error
def get_tiers():
    """Available plans with prices and benefits"""
    config = load_membership_config()
    tiers = sorted(config.tiers.values(), key=lambda cfg: cfg.monthly_price)
    return APIResponse.success(
        data={
            'version': config.version,
            'cancellationHours': config.cancellation_hours,
            'tiers': [cfg.to_dict() for cfg in tiers],
        },
        message='Membership tiers retrieved successfully'
    )


@membership_bp.route('/me', methods=['GET'])
@jwt_required()
@handle_service_error
def get_my_membership():
    """Current plan and monthly usage"""
    user = User.query.get(get_jwt_identity())
    if not user or not user.is_active:
        return APIResponse.unauthorized('User not found or inactive')

    config = load_membership_config()
    return APIResponse.success(
        data={
            'user': user.to_dict(),
            'usage': SubscriptionManager.usage_summary(user, config),
        },
        message='Membership retrieved successfully'
    )


@membership_bp.route('/subscribe', methods=['POST'])
@jwt_required()
@handle_service_error
def subscribe():
    """
    Activate a plan once its payment was confirmed

    Request Body:
    {
        "tier": "PLUS",
        "months": 1
    }
    """
    user = User.query.get(get_jwt_identity())
    if not user or not user.is_active:
        return APIResponse.unauthorized('User not found or inactive')

    data = request.get_json(silent=True) or {}
    errors = {}
    try:
        tier = MembershipTier(str(data.get('tier', '')).upper())
    except ValueError:
        tier = None
    if tier is None or tier == MembershipTier.NONE:
        errors['tier'] = 'A valid membership tier is required'

    months = data.get('months', 1)
    if not isinstance(months, int) or isinstance(months, bool) or not 1 <= months <= 12:
        errors['months'] = 'Months must be between 1 and 12'
    if errors:
        return APIResponse.validation_error(errors)

    config = load_membership_config()
    SubscriptionManager.activate_subscription(user, tier, config, duration_months=months)
    current_app.logger.info(f"Membership {tier.value} activated for {user.id}")

    return APIResponse.success(
        data={
            'user': user.to_dict(),
            'usage': SubscriptionManager.usage_summary(user, config),
        },
        message=f'Plan {tier.value} activated'
    )


@membership_bp.route('/cancel', methods=['POST'])
@jwt_required()
@handle_service_error
def cancel_membership():
    user = User.query.get(get_jwt_identity())
    if not user or not user.is_active:
        return APIResponse.unauthorized('User not found or inactive')

    data = request.get_json(silent=True) or {}
    SubscriptionManager.cancel_subscription(user, reason=data.get('reason'))

    return APIResponse.success(data=user.to_dict(), message='Membership cancelled')
