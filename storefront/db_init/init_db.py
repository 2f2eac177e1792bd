"""
Database Initialization Script
Creates tables and seeds settings, catalog and users
"""

import logging

from storefront.extensions import db
from storefront.models import Settings
from storefront.services.membership import DEFAULT_CANCELLATION_HOURS, DEFAULT_MEMBERSHIP_TIERS
from storefront.services.settings import CANCELLATION_HOURS_KEY, TIERS_KEY, VERSION_KEY

logger = logging.getLogger(__name__)


def clear_database():
    """Drop all tables and recreate them"""
    logger.info("Dropping all tables...")
    db.drop_all()
    db.create_all()
    logger.info("Tables recreated")


def create_default_settings():
    """Seed the tier table and cancellation threshold unless already present"""
    if Settings.query.filter_by(key=TIERS_KEY).first():
        return False

    Settings.set_value(TIERS_KEY, DEFAULT_MEMBERSHIP_TIERS, data_type='json',
                       description='Membership tier table', commit=False)
    Settings.set_value(CANCELLATION_HOURS_KEY, DEFAULT_CANCELLATION_HOURS, data_type='int',
                       description='Hours of notice required for a full refund', commit=False)
    Settings.set_value(VERSION_KEY, 'v1', commit=False)
    db.session.commit()
    return True


def init_database(with_sample_data=True):
    """
    Initialize the database with tables and optionally sample data

    Args:
        with_sample_data (bool): Whether to populate with sample catalog and users
    """
    db.create_all()
    created = create_default_settings()
    logger.info(f"Tables ready, default settings {'created' if created else 'kept'}")

    if with_sample_data:
        from .sample_data import create_sample_catalog, create_sample_users
        tours, spaces = create_sample_catalog()
        users = create_sample_users()
        logger.info(f"Sample data: {len(tours)} tours, {len(spaces)} spaces, {len(users)} users")
