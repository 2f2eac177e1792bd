from datetime import datetime, timezone
import uuid
from storefront.extensions import db
from storefront.models.enums import BookingStatus

class TourBooking(db.Model):
    __tablename__ = 'tour_bookings'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_reference = db.Column(db.String(20), unique=True, nullable=False, index=True)

    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    tour_id = db.Column(db.String(36), db.ForeignKey('tours.id'), nullable=False, index=True)

    status = db.Column(db.Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False)
    destination = db.Column(db.String(200))
    date = db.Column(db.Date, nullable=False)
    pax = db.Column(db.Integer, default=1, nullable=False)

    # Pricing snapshot (per person)
    logistics_cost = db.Column(db.Numeric(12, 2), nullable=False)
    service_fee = db.Column(db.Numeric(12, 2), nullable=False)
    discount_amount = db.Column(db.Numeric(12, 2), default=0)
    total_paid = db.Column(db.Numeric(12, 2), nullable=False)
    member_tier = db.Column(db.String(20))

    # Quota charged to the member, given back on cancellation
    km_charged = db.Column(db.Integer, default=0, nullable=False)
    usage_period = db.Column(db.Integer)

    # Cancellation
    cancellation_reason = db.Column(db.String(500))
    refund_amount = db.Column(db.Numeric(12, 2))
    refund_percentage = db.Column(db.Integer)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    cancelled_at = db.Column(db.DateTime)

    def __init__(self, **kwargs):
        super(TourBooking, self).__init__(**kwargs)
        if not self.booking_reference:
            self.booking_reference = self.generate_booking_reference()

    @staticmethod
    def generate_booking_reference():
        """Generate unique booking reference like GNM-ABC123"""
        import random
        import string
        suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=6))
        return f"GNM-{suffix}"

    def to_dict(self):
        return {
            'id': self.id,
            'bookingReference': self.booking_reference,
            'tourId': self.tour_id,
            'destination': self.destination,
            'date': self.date.isoformat(),
            'pax': self.pax,
            'status': self.status.value,
            'logisticsCost': float(self.logistics_cost),
            'serviceFee': float(self.service_fee),
            'discountAmount': float(self.discount_amount or 0),
            'totalPaid': float(self.total_paid),
            'memberTier': self.member_tier,
            'km': self.km_charged,
            'cancellationReason': self.cancellation_reason,
            'refundAmount': float(self.refund_amount) if self.refund_amount is not None else None,
            'refundPercentage': self.refund_percentage,
        }
