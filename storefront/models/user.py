from datetime import datetime, timezone
import uuid
from storefront.extensions import db
from storefront.models.enums import UserRole, MembershipTier

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    birth_date = db.Column(db.Date)
    role = db.Column(db.Enum(UserRole), default=UserRole.USER, nullable=False)

    # Membership
    membership_tier = db.Column(db.Enum(MembershipTier), default=MembershipTier.NONE, nullable=False)
    membership_valid_until = db.Column(db.Date)
    used_km_this_month = db.Column(db.Integer, default=0, nullable=False)
    space_bookings_this_month = db.Column(db.Integer, default=0, nullable=False)
    # Bumped whenever the monthly counters restart
    usage_period = db.Column(db.Integer, default=1, nullable=False)
    membership_cancellation_reason = db.Column(db.String(500))

    trips_count = db.Column(db.Integer, default=0, nullable=False)

    # Account status
    is_active = db.Column(db.Boolean, default=True)

    # Bumped on every flush; concurrent writers on the same member fail with StaleDataError
    version = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    tour_bookings = db.relationship('TourBooking', backref='customer', lazy='dynamic')
    space_bookings = db.relationship('SpaceBooking', backref='customer', lazy='dynamic')
    notifications = db.relationship('Notification', backref='user', lazy='dynamic')

    __mapper_args__ = {'version_id_col': version}

    def is_member(self):
        return self.membership_tier is not None and self.membership_tier != MembershipTier.NONE

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role.value,
            'membership': {
                'tier': self.membership_tier.value,
                'validUntil': self.membership_valid_until.isoformat() if self.membership_valid_until else None,
                'usedThisMonth': self.used_km_this_month or 0,
                'spaceBookingsThisMonth': self.space_bookings_this_month or 0,
            },
            'tripsCount': self.trips_count or 0,
        }
