import enum


class UserRole(enum.Enum):
    USER = 'USER'
    ADMIN = 'ADMIN'


class MembershipTier(enum.Enum):
    NONE = 'NONE'
    BASICO = 'BASICO'
    INTERMEDIO = 'INTERMEDIO'
    PLUS = 'PLUS'
    ELITE = 'ELITE'


class BookingStatus(enum.Enum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'


class TourStatus(enum.Enum):
    OPEN = 'OPEN'
    CONFIRMED = 'CONFIRMED'
    REPROGRAMMED = 'REPROGRAMMED'
    CANCELLED = 'CANCELLED'


class SpaceType(enum.Enum):
    DEPTO = 'DEPTO'
    QUINCHO = 'QUINCHO'


class NotificationType(enum.Enum):
    BOOKING = 'BOOKING'
    MEMBERSHIP = 'MEMBERSHIP'
    SPACE_BOOKING = 'SPACE_BOOKING'
    CANCELLATION = 'CANCELLATION'
    SYSTEM = 'SYSTEM'
