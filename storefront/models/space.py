from datetime import datetime, timezone
import uuid
from storefront.extensions import db
from storefront.models.enums import SpaceType, BookingStatus
from storefront.utils.dates import to_local_iso

class Space(db.Model):
    __tablename__ = 'spaces'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.Enum(SpaceType), default=SpaceType.QUINCHO, nullable=False)
    description = db.Column(db.Text)

    # Flat rental price, no component split
    price = db.Column(db.Numeric(12, 2), nullable=False)
    damage_deposit = db.Column(db.Numeric(12, 2), default=0)
    cleaning_fee = db.Column(db.Numeric(12, 2), default=0)

    capacity = db.Column(db.Integer, default=0)
    rules = db.Column(db.JSON)
    images = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    bookings = db.relationship('SpaceBooking', backref='space', lazy='dynamic')

    def booked_dates(self):
        """Dates (YYYY-MM-DD) held by a live booking"""
        rows = self.bookings.filter(SpaceBooking.slot_active.is_(True)).all()
        return sorted(to_local_iso(b.date) for b in rows)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type.value,
            'description': self.description,
            'price': float(self.price),
            'damageDeposit': float(self.damage_deposit or 0),
            'cleaningFee': float(self.cleaning_fee or 0),
            'capacity': self.capacity,
            'rules': self.rules or [],
            'availability': self.booked_dates(),
        }


class SpaceBooking(db.Model):
    __tablename__ = 'space_bookings'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    space_id = db.Column(db.String(36), db.ForeignKey('spaces.id'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False)

    # True while the booking holds the date, NULL once released.
    # NULLs never collide, so the constraint only guards live bookings.
    slot_active = db.Column(db.Boolean)

    # Pricing snapshot
    original_price = db.Column(db.Numeric(12, 2), nullable=False)
    discount_amount = db.Column(db.Numeric(12, 2), default=0)
    total_paid = db.Column(db.Numeric(12, 2), nullable=False)
    discount_applied = db.Column(db.Boolean, default=False)
    usage_period = db.Column(db.Integer)

    # Cancellation
    cancellation_reason = db.Column(db.String(500))
    refund_amount = db.Column(db.Numeric(12, 2))
    refund_percentage = db.Column(db.Integer)
    cancelled_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('space_id', 'date', 'slot_active', name='uq_space_booking_slot'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'spaceId': self.space_id,
            'userId': self.user_id,
            'date': self.date.isoformat(),
            'status': self.status.value,
            'originalPrice': float(self.original_price),
            'discountAmount': float(self.discount_amount or 0),
            'totalPaid': float(self.total_paid),
            'discountApplied': bool(self.discount_applied),
            'cancellationReason': self.cancellation_reason,
            'refundAmount': float(self.refund_amount) if self.refund_amount is not None else None,
            'refundPercentage': self.refund_percentage,
        }
