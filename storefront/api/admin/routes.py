from flask import request, current_app
from flask_jwt_extended import get_jwt_identity

from storefront.api.admin import admin_bp
from storefront.services.membership import ConfigurationError
from storefront.services.settings import load_membership_config, save_membership_config
from storefront.services.subscription import SubscriptionManager
from storefront.utils.api_response import APIResponse
from storefront.utils.audit_logging import AuditLogger
from storefront.utils.decorators import admin_required, handle_service_error


@admin_bp.route('/settings', methods=['GET'])
@admin_required
@handle_service_error
def get_settings():
    config = load_membership_config()
    return APIResponse.success(data=config.to_dict(), message='Settings retrieved successfully')


@admin_bp.route('/settings', methods=['PUT'])
@admin_required
@handle_service_error
def update_settings():
    """
    Update the tier table and/or the cancellation notice threshold

    Request Body:
    {
        "cancellationHours": 72,
        "tiers": {"PLUS": {"price": 15000, "discount": 0.25, "kmLimit": 3000, ...}}
    }

    Only the tiers and fields sent are changed; the rest of the table is kept.
    Invalid values are rejected, never clamped.
    """
    data = request.get_json(silent=True) or {}
    if 'tiers' not in data and 'cancellationHours' not in data:
        return APIResponse.validation_error({'settings': 'Nothing to update'})

    before = load_membership_config()
    try:
        config = save_membership_config(
            raw_tiers=data.get('tiers'),
            cancellation_hours=data.get('cancellationHours')
        )
    except ConfigurationError as e:
        return APIResponse.validation_error({'settings': str(e)}, message='Invalid configuration')

    AuditLogger.log_action(
        user_id=get_jwt_identity(),
        action='SETTINGS_UPDATED',
        entity_type='settings',
        entity_id=config.version,
        description=f"Membership settings {before.version} -> {config.version}",
        changes={
            'cancellationHours': [before.cancellation_hours, config.cancellation_hours],
        }
    )
    current_app.logger.info(f"Settings updated to {config.version}")

    return APIResponse.success(data=config.to_dict(), message='Settings updated successfully')


@admin_bp.route('/membership/reset-usage', methods=['POST'])
@admin_required
@handle_service_error
def reset_usage():
    """Start a new month of quotas for every member"""
    updated = SubscriptionManager.reset_monthly_counters()
    return APIResponse.success(data={'membersReset': updated}, message='Monthly usage reset')
