"""
Booking API Validation Schemas
"""
from typing import Optional, Dict, Any, Tuple

from storefront.utils.dates import InvalidDateError, parse_local_date

MAX_PAX = 50
MAX_REASON_LENGTH = 500


class BookingSchemas:
    """Validation schemas for booking endpoints"""

    @staticmethod
    def validate_tour_booking(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate a tour booking request

        Returns:
            Tuple of (is_valid, errors, cleaned_data)
        """
        errors = {}
        cleaned_data = {}

        tour_id = str(data.get('tourId') or '').strip()
        if not tour_id:
            errors['tourId'] = 'Tour ID is required'
        else:
            cleaned_data['tour_id'] = tour_id

        pax = data.get('pax', 1)
        if not isinstance(pax, int) or isinstance(pax, bool):
            errors['pax'] = 'pax must be an integer'
        elif pax < 1 or pax > MAX_PAX:
            errors['pax'] = f'pax must be between 1 and {MAX_PAX}'
        else:
            cleaned_data['pax'] = pax

        if errors:
            return False, errors, None
        return True, None, cleaned_data

    @staticmethod
    def validate_space_booking(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        errors = {}
        cleaned_data = {}

        space_id = str(data.get('spaceId') or '').strip()
        if not space_id:
            errors['spaceId'] = 'Space ID is required'
        else:
            cleaned_data['space_id'] = space_id

        raw_date = data.get('date')
        if not raw_date:
            errors['date'] = 'Date is required'
        else:
            try:
                cleaned_data['date'] = parse_local_date(raw_date)
            except InvalidDateError:
                errors['date'] = 'Invalid date format. Use YYYY-MM-DD'

        if errors:
            return False, errors, None
        return True, None, cleaned_data

    @staticmethod
    def validate_cancellation(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        reason = data.get('reason')
        if reason is None:
            return True, None, {'reason': None}
        if not isinstance(reason, str):
            return False, {'reason': 'Reason must be text'}, None

        reason = reason.strip()
        if len(reason) > MAX_REASON_LENGTH:
            return False, {'reason': f'Reason must not exceed {MAX_REASON_LENGTH} characters'}, None
        return True, None, {'reason': reason or None}
