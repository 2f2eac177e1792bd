from decimal import Decimal, InvalidOperation

from flask import request
from flask_jwt_extended import jwt_required, get_jwt_identity

from storefront.api.pricing import pricing_bp
from storefront.models import User, Tour, Space
from storefront.models.enums import TourStatus
from storefront.services.membership import member_from_user
from storefront.services.pricing import BookableSpace, BookableTour, PricingCalculator
from storefront.services.refund import RefundPolicy
from storefront.services.settings import load_membership_config
from storefront.utils.api_response import APIResponse
from storefront.utils.decorators import handle_service_error


def _optional_member():
    """Member snapshot for the caller, anonymous without a token"""
    user_id = get_jwt_identity()
    user = User.query.get(user_id) if user_id else None
    if user is not None and not user.is_active:
        user = None
    return member_from_user(user)


@pricing_bp.route('/tours', methods=['GET'])
@jwt_required(optional=True)
@handle_service_error
def list_tour_prices():
    """
    Catalog prices for every open tour, as seen by the caller

    Returns:
        200: List of {tour, breakdown}
    """
    config = load_membership_config()
    member = _optional_member()

    tours = Tour.query.filter(Tour.status != TourStatus.CANCELLED).order_by(Tour.start_date.asc()).all()
    items = [
        {
            'tour': tour.to_dict(),
            'breakdown': PricingCalculator.compute_tour_breakdown(
                BookableTour.from_model(tour), member, config
            ).to_dict()
        }
        for tour in tours
    ]
    return APIResponse.success(data=items, message='Tour prices retrieved successfully')


@pricing_bp.route('/tours/<tour_id>', methods=['GET'])
@jwt_required(optional=True)
@handle_service_error
def get_tour_price(tour_id):
    """
    Itemized tour price

    Query params:
        pax: Number of travellers (default 1)
    """
    tour = Tour.query.get(tour_id)
    if not tour:
        return APIResponse.not_found('Tour not found')

    pax = request.args.get('pax', 1, type=int)
    if pax is None or pax < 1:
        return APIResponse.validation_error({'pax': 'pax must be a positive integer'})

    config = load_membership_config()
    breakdown = PricingCalculator.compute_tour_breakdown(
        BookableTour.from_model(tour), _optional_member(), config
    )

    return APIResponse.success(
        data={
            'tourId': tour.id,
            'pax': pax,
            'breakdown': breakdown.to_dict(),
            'totalAmount': float(PricingCalculator.total_for_party(breakdown, pax)),
            'configVersion': config.version,
        },
        message='Price computed successfully'
    )


@pricing_bp.route('/spaces/<space_id>', methods=['GET'])
@jwt_required(optional=True)
@handle_service_error
def get_space_price(space_id):
    space = Space.query.get(space_id)
    if not space:
        return APIResponse.not_found('Space not found')

    config = load_membership_config()
    breakdown = PricingCalculator.compute_space_breakdown(
        BookableSpace.from_model(space), _optional_member(), config
    )

    return APIResponse.success(
        data={
            'spaceId': space.id,
            'breakdown': breakdown.to_dict(),
            'availability': space.booked_dates(),
            'configVersion': config.version,
        },
        message='Price computed successfully'
    )


@pricing_bp.route('/refund-quote', methods=['POST'])
@handle_service_error
def refund_quote():
    """
    Refund owed if a booking were cancelled now

    Request Body:
    {
        "scheduledDate": "2026-12-01",
        "amountPaid": 100000
    }
    """
    data = request.get_json(silent=True) or {}

    errors = {}
    if not data.get('scheduledDate'):
        errors['scheduledDate'] = 'Scheduled date is required'
    try:
        amount_paid = Decimal(str(data.get('amountPaid')))
        if not amount_paid.is_finite() or amount_paid < 0:
            raise InvalidOperation
    except (InvalidOperation, ValueError):
        errors['amountPaid'] = 'Amount paid must be a non-negative number'
    if errors:
        return APIResponse.validation_error(errors)

    config = load_membership_config()
    decision = RefundPolicy.compute_refund(
        data['scheduledDate'], amount_paid, config.cancellation_hours
    )

    return APIResponse.success(
        data={**decision.to_dict(), 'noticeThresholdHours': config.cancellation_hours},
        message='Refund computed successfully'
    )
