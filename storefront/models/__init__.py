from storefront.models.user import User
from storefront.models.tour import Tour
from storefront.models.space import Space, SpaceBooking
from storefront.models.booking import TourBooking
from storefront.models.notification import Notification
from storefront.models.settings import Settings
from storefront.models.audit_log import AuditLog
