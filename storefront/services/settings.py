"""
Loads the admin-edited membership settings as a validated snapshot
"""

import logging
from collections.abc import Mapping

from flask import current_app

from storefront.extensions import db
from storefront.models import Settings
from storefront.services.membership import (
    DEFAULT_CANCELLATION_HOURS,
    DEFAULT_MEMBERSHIP_TIERS,
    MembershipConfig,
    build_membership_config,
)

logger = logging.getLogger(__name__)

TIERS_KEY = 'membership_tiers'
CANCELLATION_HOURS_KEY = 'cancellation_hours'
VERSION_KEY = 'config_version'


def load_membership_config() -> MembershipConfig:
    """
    Read tiers and the cancellation threshold once, for one request.

    Raises:
        ConfigurationError: If the stored configuration is invalid
    """
    raw_tiers = Settings.get_value(TIERS_KEY, DEFAULT_MEMBERSHIP_TIERS)
    hours = Settings.get_value(
        CANCELLATION_HOURS_KEY,
        current_app.config.get('CANCELLATION_HOURS', DEFAULT_CANCELLATION_HOURS)
    )
    version = Settings.get_value(
        VERSION_KEY,
        current_app.config.get('MEMBERSHIP_CONFIG_VERSION', 'v1')
    )
    return build_membership_config(raw_tiers, cancellation_hours=hours, version=version)


def save_membership_config(raw_tiers=None, cancellation_hours=None) -> MembershipConfig:
    """
    Validate and persist new settings, bumping the config version.

    Submitted tiers are merged field by field into the current table; tiers
    that are not mentioned keep their values. Nothing is written when
    validation fails.
    """
    current = load_membership_config()
    tiers = _merge_tiers(current, raw_tiers)
    hours = cancellation_hours if cancellation_hours is not None else current.cancellation_hours
    version = _next_version(current.version)

    config = build_membership_config(tiers, cancellation_hours=hours, version=version)

    Settings.set_value(TIERS_KEY, tiers, data_type='json',
                       description='Membership tier table', commit=False)
    Settings.set_value(CANCELLATION_HOURS_KEY, config.cancellation_hours, data_type='int',
                       description='Hours of notice required for a full refund', commit=False)
    Settings.set_value(VERSION_KEY, config.version, commit=False)
    db.session.commit()

    logger.info(f"Membership settings saved as {config.version}")
    return config


def _next_version(version: str) -> str:
    if version.startswith('v') and version[1:].isdigit():
        return f"v{int(version[1:]) + 1}"
    return f"{version}.1"


def _merge_tiers(current: MembershipConfig, raw_tiers) -> dict:
    tiers = {tier.value: cfg.to_dict() for tier, cfg in current.tiers.items()}
    if raw_tiers is None:
        return tiers
    if not isinstance(raw_tiers, Mapping):
        # Let validation report the bad shape
        return raw_tiers

    for name, raw in raw_tiers.items():
        existing = tiers.get(name)
        if existing is None or not isinstance(raw, Mapping):
            tiers[name] = raw
            continue
        merged = {**existing, **raw}
        if isinstance(raw.get('spaceConfig'), Mapping):
            merged['spaceConfig'] = {**existing['spaceConfig'], **raw['spaceConfig']}
        tiers[name] = merged
    return tiers
