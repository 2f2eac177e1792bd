import logging
from functools import wraps

from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from storefront.services.booking import BookingServiceError
from storefront.services.membership import ConfigurationError
from storefront.services.subscription import SubscriptionError
from storefront.utils.api_response import APIResponse
from storefront.utils.dates import InvalidDateError

logger = logging.getLogger(__name__)

SUPPORT_MESSAGE = 'Cannot compute price/refund, please contact support'


def admin_required(f):
    """Decorator to require an ADMIN role"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from storefront.models import User
        from storefront.models.enums import UserRole

        verify_jwt_in_request()
        user = User.query.get(get_jwt_identity())

        if not user or not user.is_active:
            return APIResponse.unauthorized("Please login to continue")

        if user.role != UserRole.ADMIN:
            return APIResponse.forbidden("You don't have permission to access this resource")

        return f(*args, **kwargs)
    return decorated_function


def handle_service_error(f):
    """Decorator for consistent error handling on pricing and booking endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except BookingServiceError as e:
            logger.info(f"Booking rejected: {str(e)}")
            return APIResponse.error(str(e), status_code=e.status_code, error_code=e.code)
        except SubscriptionError as e:
            return APIResponse.error(str(e), error_code='SUBSCRIPTION_ERROR')
        except InvalidDateError as e:
            return APIResponse.validation_error({'date': str(e)})
        except ConfigurationError as e:
            logger.error(f"Invalid membership configuration: {str(e)}")
            return APIResponse.error(SUPPORT_MESSAGE, status_code=500, error_code='CONFIGURATION_ERROR')
        except Exception:
            logger.exception("Unexpected error in storefront endpoint")
            return APIResponse.error(SUPPORT_MESSAGE, status_code=500, error_code='INTERNAL_ERROR')
    return decorated_function
