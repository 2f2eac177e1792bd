from flask import request
from flask_jwt_extended import jwt_required, get_jwt_identity

from storefront.api.bookings import bookings_bp
from storefront.api.bookings.schemas import BookingSchemas
from storefront.models import TourBooking, SpaceBooking
from storefront.services.booking import BookingService
from storefront.services.settings import load_membership_config
from storefront.utils.api_response import APIResponse
from storefront.utils.audit_logging import AuditLogger
from storefront.utils.decorators import handle_service_error


def _service():
    return BookingService(load_membership_config())


@bookings_bp.route('', methods=['GET'])
@jwt_required()
@handle_service_error
def list_bookings():
    """Travel history and space reservations of the caller"""
    user_id = get_jwt_identity()

    tours = TourBooking.query.filter_by(user_id=user_id).order_by(TourBooking.date.desc()).all()
    spaces = SpaceBooking.query.filter_by(user_id=user_id).order_by(SpaceBooking.date.desc()).all()

    return APIResponse.success(
        data={
            'tours': [b.to_dict() for b in tours],
            'spaces': [b.to_dict() for b in spaces],
        },
        message='Bookings retrieved successfully'
    )


@bookings_bp.route('/tours', methods=['POST'])
@jwt_required()
@handle_service_error
def book_tour():
    """
    Confirm a tour booking

    Request Body:
    {
        "tourId": "uuid",
        "pax": 2
    }
    """
    data = request.get_json(silent=True) or {}
    is_valid, errors, cleaned = BookingSchemas.validate_tour_booking(data)
    if not is_valid:
        return APIResponse.validation_error(errors)

    result = _service().book_tour(get_jwt_identity(), cleaned['tour_id'], pax=cleaned['pax'])

    return APIResponse.success(
        data={
            'booking': result['booking'].to_dict(),
            'breakdown': result['breakdown'].to_dict(),
        },
        message='Booking confirmed',
        status_code=201
    )


@bookings_bp.route('/tours/<booking_id>/refund-preview', methods=['GET'])
@jwt_required()
@handle_service_error
def tour_refund_preview(booking_id):
    decision = _service().refund_preview(get_jwt_identity(), booking_id)
    return APIResponse.success(data=decision.to_dict(), message='Refund computed successfully')


@bookings_bp.route('/tours/<booking_id>/cancel', methods=['POST'])
@jwt_required()
@handle_service_error
def cancel_tour(booking_id):
    """
    Cancel a confirmed tour booking

    Request Body:
    {
        "reason": "Change of plans"   // Optional
    }
    """
    data = request.get_json(silent=True) or {}
    is_valid, errors, cleaned = BookingSchemas.validate_cancellation(data)
    if not is_valid:
        return APIResponse.validation_error(errors)

    user_id = get_jwt_identity()
    result = _service().cancel_tour_booking(user_id, booking_id, reason=cleaned['reason'])
    booking, refund = result['booking'], result['refund']

    AuditLogger.log_action(
        user_id=user_id,
        action='TOUR_BOOKING_CANCELLED',
        entity_type='tour_booking',
        entity_id=booking.id,
        description=f"Cancelled {booking.booking_reference}, refund {refund.percentage}%",
        changes={'refundAmount': float(refund.amount), 'refundPercentage': refund.percentage}
    )

    return APIResponse.success(
        data={'booking': booking.to_dict(), 'refund': refund.to_dict()},
        message='Booking cancelled'
    )


@bookings_bp.route('/spaces', methods=['POST'])
@jwt_required()
@handle_service_error
def book_space():
    """
    Reserve a space for one date

    Request Body:
    {
        "spaceId": "uuid",
        "date": "2026-12-24"
    }
    """
    data = request.get_json(silent=True) or {}
    is_valid, errors, cleaned = BookingSchemas.validate_space_booking(data)
    if not is_valid:
        return APIResponse.validation_error(errors)

    result = _service().book_space(get_jwt_identity(), cleaned['space_id'], cleaned['date'])

    return APIResponse.success(
        data={
            'booking': result['booking'].to_dict(),
            'breakdown': result['breakdown'].to_dict(),
        },
        message='Space reserved',
        status_code=201
    )


@bookings_bp.route('/spaces/<booking_id>/cancel', methods=['POST'])
@jwt_required()
@handle_service_error
def cancel_space(booking_id):
    data = request.get_json(silent=True) or {}
    is_valid, errors, cleaned = BookingSchemas.validate_cancellation(data)
    if not is_valid:
        return APIResponse.validation_error(errors)

    user_id = get_jwt_identity()
    result = _service().cancel_space_booking(user_id, booking_id, reason=cleaned['reason'])
    booking, refund = result['booking'], result['refund']

    AuditLogger.log_action(
        user_id=user_id,
        action='SPACE_BOOKING_CANCELLED',
        entity_type='space_booking',
        entity_id=booking.id,
        description=f"Cancelled space booking for {booking.date.isoformat()}, refund {refund.percentage}%",
        changes={'refundAmount': float(refund.amount), 'refundPercentage': refund.percentage}
    )

    return APIResponse.success(
        data={'booking': booking.to_dict(), 'refund': refund.to_dict()},
        message='Booking cancelled'
    )
