from datetime import datetime, timezone
import uuid
from storefront.extensions import db
from storefront.models.enums import TourStatus

class Tour(db.Model):
    __tablename__ = 'tours'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    destination = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)

    # Pricing: two independently priced components, only the ticket is discountable
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    price_logistics = db.Column(db.Numeric(12, 2))
    price_ticket = db.Column(db.Numeric(12, 2))
    km = db.Column(db.Integer, nullable=False, default=0)

    # Dates (calendar dates, interpreted as local midnight)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    deadline = db.Column(db.Date)

    capacity = db.Column(db.Integer, default=0)
    min_capacity = db.Column(db.Integer, default=0)
    status = db.Column(db.Enum(TourStatus), default=TourStatus.OPEN, nullable=False)

    itinerary = db.Column(db.JSON)  # List of day descriptions
    images = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    bookings = db.relationship('TourBooking', backref='tour', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'destination': self.destination,
            'description': self.description,
            'price': float(self.price or 0),
            'priceLogistics': float(self.price_logistics) if self.price_logistics is not None else None,
            'priceTicket': float(self.price_ticket) if self.price_ticket is not None else None,
            'km': self.km,
            'dates': {
                'start': self.start_date.isoformat() if self.start_date else None,
                'end': self.end_date.isoformat() if self.end_date else None,
                'deadline': self.deadline.isoformat() if self.deadline else None,
            },
            'capacity': self.capacity,
            'minCapacity': self.min_capacity,
            'status': self.status.value,
            'itinerary': self.itinerary or [],
        }
