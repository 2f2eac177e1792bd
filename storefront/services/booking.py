"""
Booking Service
Confirms and cancels tour/space bookings around the pricing and refund engines.

The engines only read snapshots. This service owns the read-check-write
sequence on member usage and space dates, and serializes it:
- per member: the user row is selected FOR UPDATE and carries an optimistic
  version counter, so two concurrent bookings cannot both spend the same quota
- per (space, date): a unique slot constraint lets only one live booking hold a date
"""

import logging
from datetime import datetime, date, timezone
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from storefront.extensions import db
from storefront.models import User, Tour, Space, SpaceBooking, TourBooking
from storefront.models.enums import BookingStatus, TourStatus
from storefront.services.membership import MembershipConfig, member_from_user
from storefront.services.notification import NotificationService
from storefront.services.pricing import BookableSpace, BookableTour, PricingCalculator
from storefront.services.refund import RefundDecision, RefundPolicy
from storefront.utils.dates import parse_local_date

logger = logging.getLogger(__name__)


class BookingServiceError(Exception):
    """Base exception for booking service errors"""
    code = 'BOOKING_ERROR'
    status_code = 400


class NotFoundError(BookingServiceError):
    code = 'NOT_FOUND'
    status_code = 404


class InvalidBookingStateError(BookingServiceError):
    code = 'INVALID_STATUS'
    status_code = 409


class DateUnavailableError(BookingServiceError):
    code = 'DATE_UNAVAILABLE'
    status_code = 409


class TourUnavailableError(BookingServiceError):
    code = 'TOUR_UNAVAILABLE'
    status_code = 409


class ConcurrentUpdateError(BookingServiceError):
    code = 'CONCURRENT_UPDATE'
    status_code = 409


class BookingService:
    """Service for booking lifecycle operations"""

    def __init__(self, config: MembershipConfig):
        """
        Args:
            config: Membership snapshot loaded for this request
        """
        self.config = config

    # ==================== TOURS ====================

    def book_tour(self, user_id: str, tour_id: str, pax: int = 1) -> Dict:
        """
        Confirm a tour booking at the member price.

        Returns:
            Dict with the booking and the breakdown it was priced with
        """
        if pax < 1:
            raise BookingServiceError("At least one traveller is required")

        user = self._lock_member(user_id)
        tour = Tour.query.filter_by(id=tour_id).with_for_update().first()
        if not tour:
            raise NotFoundError("Tour not found")
        if tour.status == TourStatus.CANCELLED:
            raise TourUnavailableError("This tour has been cancelled")
        if tour.start_date < date.today():
            raise TourUnavailableError("This tour has already departed")
        if tour.capacity and self._seats_taken(tour) + pax > tour.capacity:
            raise TourUnavailableError("Not enough seats left on this tour")

        breakdown = PricingCalculator.compute_tour_breakdown(
            BookableTour.from_model(tour),
            member_from_user(user),
            self.config
        )

        booking = TourBooking(
            user_id=user.id,
            tour_id=tour.id,
            destination=tour.destination,
            date=tour.start_date,
            pax=pax,
            status=BookingStatus.CONFIRMED,
            logistics_cost=breakdown.logistics_cost,
            service_fee=breakdown.service_fee,
            discount_amount=breakdown.discount_amount,
            total_paid=PricingCalculator.total_for_party(breakdown, pax),
            member_tier=breakdown.member_tier.value,
            km_charged=breakdown.km_consumed,
            usage_period=user.usage_period,
        )
        db.session.add(booking)

        user.used_km_this_month = (user.used_km_this_month or 0) + breakdown.km_consumed
        user.trips_count = (user.trips_count or 0) + 1

        self._commit()
        NotificationService.create_notification(
            NotificationService.tour_booked(booking, breakdown.km_consumed), commit=True
        )

        logger.info(
            f"Tour booking {booking.booking_reference} confirmed for user {user.id} "
            f"(total {booking.total_paid}, discount applied: {breakdown.is_discount_applied})"
        )
        return {'booking': booking, 'breakdown': breakdown}

    def refund_preview(self, user_id: str, booking_id: str, now: Optional[datetime] = None) -> RefundDecision:
        booking = self._get_tour_booking(user_id, booking_id)
        self._ensure_cancellable(booking)
        return RefundPolicy.compute_refund(
            booking.date, booking.total_paid, self.config.cancellation_hours, now=now
        )

    def cancel_tour_booking(self, user_id: str, booking_id: str, reason: str = None,
                            now: Optional[datetime] = None) -> Dict:
        """CONFIRMED -> CANCELLED, with refund and quota give-back"""
        user = self._lock_member(user_id)
        booking = self._get_tour_booking(user_id, booking_id)
        self._ensure_cancellable(booking)

        decision = RefundPolicy.compute_refund(
            booking.date, booking.total_paid, self.config.cancellation_hours, now=now
        )

        booking.status = BookingStatus.CANCELLED
        booking.cancelled_at = datetime.now(timezone.utc)
        booking.cancellation_reason = reason
        booking.refund_amount = decision.amount
        booking.refund_percentage = decision.percentage

        if booking.km_charged and self._same_usage_period(user, booking):
            user.used_km_this_month = max(0, (user.used_km_this_month or 0) - booking.km_charged)

        self._commit()
        NotificationService.create_notification(
            NotificationService.booking_cancelled(user.id, booking.destination, decision), commit=True
        )

        logger.info(
            f"Tour booking {booking.booking_reference} cancelled, refund {decision.amount} "
            f"({decision.percentage}%)"
        )
        return {'booking': booking, 'refund': decision}

    # ==================== SPACES ====================

    def book_space(self, user_id: str, space_id: str, booking_date) -> Dict:
        """Reserve a space for one calendar date at the member price"""
        booking_date = parse_local_date(booking_date)
        if booking_date < date.today():
            raise BookingServiceError("Cannot book a date in the past")

        user = self._lock_member(user_id)
        space = Space.query.get(space_id)
        if not space:
            raise NotFoundError("Space not found")

        if self._date_taken(space_id, booking_date):
            raise DateUnavailableError(f"{booking_date.isoformat()} is already booked")

        breakdown = PricingCalculator.compute_space_breakdown(
            BookableSpace.from_model(space),
            member_from_user(user),
            self.config
        )

        booking = SpaceBooking(
            space_id=space.id,
            user_id=user.id,
            date=booking_date,
            status=BookingStatus.CONFIRMED,
            slot_active=True,
            original_price=breakdown.original_price,
            discount_amount=breakdown.discount_amount,
            total_paid=breakdown.final_price,
            discount_applied=breakdown.is_discount_applied,
            usage_period=user.usage_period,
        )
        db.session.add(booking)

        if breakdown.is_discount_applied:
            user.space_bookings_this_month = (user.space_bookings_this_month or 0) + 1

        self._commit(on_conflict=DateUnavailableError(f"{booking_date.isoformat()} is already booked"))
        NotificationService.create_notification(
            NotificationService.space_booked(booking, space.name), commit=True
        )

        logger.info(f"Space {space.id} reserved for {booking_date.isoformat()} by user {user.id}")
        return {'booking': booking, 'breakdown': breakdown}

    def cancel_space_booking(self, user_id: str, booking_id: str, reason: str = None,
                             now: Optional[datetime] = None) -> Dict:
        user = self._lock_member(user_id)
        booking = SpaceBooking.query.filter_by(id=booking_id, user_id=user_id).first()
        if not booking:
            raise NotFoundError("Booking not found")
        self._ensure_cancellable(booking)

        decision = RefundPolicy.compute_refund(
            booking.date, booking.total_paid, self.config.cancellation_hours, now=now
        )

        booking.status = BookingStatus.CANCELLED
        booking.slot_active = None
        booking.cancelled_at = datetime.now(timezone.utc)
        booking.cancellation_reason = reason
        booking.refund_amount = decision.amount
        booking.refund_percentage = decision.percentage

        if booking.discount_applied and self._same_usage_period(user, booking):
            user.space_bookings_this_month = max(0, (user.space_bookings_this_month or 0) - 1)

        self._commit()
        NotificationService.create_notification(
            NotificationService.booking_cancelled(user.id, booking.space.name, decision), commit=True
        )

        logger.info(f"Space booking {booking.id} cancelled, refund {decision.amount}")
        return {'booking': booking, 'refund': decision}

    # ==================== HELPERS ====================

    @staticmethod
    def _lock_member(user_id: str) -> User:
        user = User.query.filter_by(id=user_id).with_for_update().first()
        if not user or not user.is_active:
            raise NotFoundError("User not found or inactive")
        return user

    @staticmethod
    def _get_tour_booking(user_id: str, booking_id: str) -> TourBooking:
        booking = TourBooking.query.filter_by(id=booking_id, user_id=user_id).first()
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    @staticmethod
    def _ensure_cancellable(booking):
        # Completed and already cancelled bookings never reach the refund engine
        if booking.status != BookingStatus.CONFIRMED:
            raise InvalidBookingStateError(
                f"Cannot cancel booking with status: {booking.status.value}"
            )

    @staticmethod
    def _same_usage_period(user: User, booking) -> bool:
        # Quota spent before the last monthly reset is gone; nothing to give back
        return booking.usage_period is not None and booking.usage_period == user.usage_period

    @staticmethod
    def _seats_taken(tour: Tour) -> int:
        return sum(
            b.pax for b in tour.bookings.filter(TourBooking.status == BookingStatus.CONFIRMED)
        )

    @staticmethod
    def _date_taken(space_id: str, booking_date: date) -> bool:
        return SpaceBooking.query.filter_by(
            space_id=space_id, date=booking_date, slot_active=True
        ).first() is not None

    @staticmethod
    def _commit(on_conflict: BookingServiceError = None):
        try:
            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            logger.warning("Concurrent update on member usage, booking rejected")
            raise ConcurrentUpdateError("Your account was updated by another request, please retry")
        except IntegrityError:
            db.session.rollback()
            if on_conflict is not None:
                raise on_conflict
            raise
