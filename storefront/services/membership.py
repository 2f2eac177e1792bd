"""
Membership tiers and member snapshots

The tier table is reference data: it is validated once when loaded and then
handed to the pricing engines as an immutable ``MembershipConfig`` snapshot.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from storefront.models.enums import MembershipTier

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_HOURS = 72

# Admin-editable tier table, in the same shape the settings screen stores it
DEFAULT_MEMBERSHIP_TIERS = {
    'BASICO': {
        'price': 5000,
        'discount': 0.15,
        'kmLimit': 1000,
        'priority': 0,
        'benefits': ['15% OFF hasta 1000 km'],
        'spaceConfig': {'discount': 0, 'limit': 0, 'decoration': None},
    },
    'INTERMEDIO': {
        'price': 10000,
        'discount': 0.20,
        'kmLimit': 2000,
        'priority': 0,
        'benefits': ['20% OFF hasta 2000 km', '10% OFF en Espacios (1 vez/mes)'],
        'spaceConfig': {'discount': 0.10, 'limit': 1, 'decoration': None},
    },
    'PLUS': {
        'price': 15000,
        'discount': 0.25,
        'kmLimit': 3000,
        'priority': 1,
        'benefits': [
            '25% OFF hasta 3000 km',
            '15% OFF en Espacios (2 veces/mes)',
            'Decoración Básica Incluida',
        ],
        'spaceConfig': {'discount': 0.15, 'limit': 2, 'decoration': 'Decoración Básica'},
    },
    'ELITE': {
        'price': 20000,
        'discount': 0.30,
        'kmLimit': 4500,
        'priority': 2,
        'benefits': [
            '30% OFF hasta 4500 km',
            '15% OFF en Espacios (3 veces/mes)',
            'Decoración Premium Incluida',
        ],
        'spaceConfig': {'discount': 0.15, 'limit': 3, 'decoration': 'Decoración Premium'},
    },
}


class ConfigurationError(Exception):
    """Raised when the membership or cancellation configuration is invalid"""
    pass


@dataclass(frozen=True)
class SpaceBenefit:
    discount_fraction: Decimal = Decimal('0')
    monthly_use_limit: int = 0
    decoration_label: Optional[str] = None


@dataclass(frozen=True)
class TierConfig:
    tier: MembershipTier
    monthly_price: Decimal
    discount_fraction: Decimal
    km_limit: int
    priority: int = 0
    benefits: Tuple[str, ...] = ()
    space_benefit: SpaceBenefit = field(default_factory=SpaceBenefit)

    def to_dict(self):
        return {
            'tier': self.tier.value,
            'price': float(self.monthly_price),
            'discount': float(self.discount_fraction),
            'kmLimit': self.km_limit,
            'priority': self.priority,
            'benefits': list(self.benefits),
            'spaceConfig': {
                'discount': float(self.space_benefit.discount_fraction),
                'limit': self.space_benefit.monthly_use_limit,
                'decoration': self.space_benefit.decoration_label,
            },
        }


@dataclass(frozen=True)
class MembershipConfig:
    """Versioned snapshot of everything the engines are allowed to read"""
    version: str
    tiers: Mapping[MembershipTier, TierConfig]
    cancellation_hours: int = DEFAULT_CANCELLATION_HOURS

    def to_dict(self):
        return {
            'version': self.version,
            'cancellationHours': self.cancellation_hours,
            'tiers': {tier.value: cfg.to_dict() for tier, cfg in self.tiers.items()},
        }


@dataclass(frozen=True)
class AnonymousMember:
    """Visitor without a plan, or a user whose tier is NONE"""
    tier: MembershipTier = MembershipTier.NONE


@dataclass(frozen=True)
class EnrolledMember:
    tier: MembershipTier
    used_this_month: int = 0
    space_bookings_this_month: int = 0


Member = Union[AnonymousMember, EnrolledMember]

ANONYMOUS = AnonymousMember()


def _fraction(value, name: str) -> Decimal:
    amount = _decimal(value, name)
    if amount < 0 or amount > 1:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {value}")
    return amount


def _decimal(value, name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ConfigurationError(f"{name} must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")


def _non_negative_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ConfigurationError(f"{name} must be an integer")
    if int(value) != value:
        raise ConfigurationError(f"{name} must be an integer, got {value}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return int(value)


def parse_tier_config(tier: MembershipTier, raw: Mapping) -> TierConfig:
    """Validate one entry of the tier table"""
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Tier {tier.value} must be an object")

    label = f"{tier.value}."
    try:
        price = _decimal(raw['price'], label + 'price')
        discount = _fraction(raw['discount'], label + 'discount')
        km_limit = _non_negative_int(raw['kmLimit'], label + 'kmLimit')
    except KeyError as e:
        raise ConfigurationError(f"Tier {tier.value} is missing {e.args[0]}")

    if price < 0:
        raise ConfigurationError(f"{label}price must not be negative, got {price}")

    space_raw = raw.get('spaceConfig') or {}
    if not isinstance(space_raw, Mapping):
        raise ConfigurationError(f"{label}spaceConfig must be an object")
    decoration = space_raw.get('decoration') or None
    space_benefit = SpaceBenefit(
        discount_fraction=_fraction(space_raw.get('discount', 0), label + 'spaceConfig.discount'),
        monthly_use_limit=_non_negative_int(space_raw.get('limit', 0), label + 'spaceConfig.limit'),
        decoration_label=str(decoration) if decoration is not None else None,
    )

    return TierConfig(
        tier=tier,
        monthly_price=price,
        discount_fraction=discount,
        km_limit=km_limit,
        priority=_non_negative_int(raw.get('priority', 0), label + 'priority'),
        benefits=tuple(raw.get('benefits') or ()),
        space_benefit=space_benefit,
    )


def build_membership_config(
    raw_tiers: Optional[Mapping] = None,
    cancellation_hours=DEFAULT_CANCELLATION_HOURS,
    version: str = 'v1'
) -> MembershipConfig:
    """
    Validate a raw tier table and build an immutable snapshot

    Args:
        raw_tiers: {tier name: {price, discount, kmLimit, spaceConfig, ...}}
        cancellation_hours: Notice threshold for full refunds
        version: Identifier of the configuration revision

    Raises:
        ConfigurationError: On any invalid value; nothing is clamped
    """
    if raw_tiers is None:
        raw_tiers = DEFAULT_MEMBERSHIP_TIERS
    if not isinstance(raw_tiers, Mapping):
        raise ConfigurationError("Membership tiers must be an object keyed by tier")

    tiers = {}
    for key, raw in raw_tiers.items():
        try:
            tier = MembershipTier(key)
        except ValueError:
            raise ConfigurationError(f"Unknown membership tier: {key}")
        if tier == MembershipTier.NONE:
            raise ConfigurationError("Tier NONE cannot carry benefits")
        tiers[tier] = parse_tier_config(tier, raw)

    hours = _non_negative_int(cancellation_hours, 'cancellationHours')

    logger.debug(f"Built membership config {version} with {len(tiers)} tiers")
    return MembershipConfig(
        version=str(version),
        tiers=MappingProxyType(tiers),
        cancellation_hours=hours,
    )


def get_tier_config(config: MembershipConfig, tier: MembershipTier) -> Optional[TierConfig]:
    """Benefits of a tier, or None for NONE / tiers missing from the table"""
    if tier is None or tier == MembershipTier.NONE:
        return None
    return config.tiers.get(tier)


def member_from_user(user) -> Member:
    """Snapshot a persisted user as a Member value"""
    if user is None:
        return ANONYMOUS

    tier = getattr(user, 'membership_tier', None) or MembershipTier.NONE
    if tier == MembershipTier.NONE:
        return ANONYMOUS

    return EnrolledMember(
        tier=tier,
        used_this_month=user.used_km_this_month or 0,
        space_bookings_this_month=user.space_bookings_this_month or 0,
    )
