from typing import Dict

from storefront.models.enums import NotificationType


class NotificationService:
    """Build notify requests and store them as in-app notifications"""

    @staticmethod
    def build_payload(user_id: str, notification_type: NotificationType, title: str, message: str,
                      link_url: str = None) -> Dict:
        """Request-to-notify payload; delivery (email, push) happens elsewhere"""
        return {
            'user_id': user_id,
            'type': notification_type.value,
            'title': title,
            'message': message,
            'link_url': link_url,
        }

    @staticmethod
    def create_notification(payload: Dict, commit: bool = False):
        """Create in-app notification"""
        from storefront.models import Notification
        from storefront.extensions import db

        notification = Notification(
            user_id=payload['user_id'],
            type=payload['type'],
            title=payload['title'],
            message=payload['message'],
            link_url=payload.get('link_url')
        )

        db.session.add(notification)
        if commit:
            db.session.commit()

        return notification

    @staticmethod
    def tour_booked(booking, km_added: int) -> Dict:
        message = f"Booking {booking.booking_reference} for {booking.destination} is confirmed."
        if km_added:
            message += f" {km_added} km were added to your monthly usage."
        return NotificationService.build_payload(
            booking.user_id,
            NotificationType.BOOKING,
            f"Booking confirmed: {booking.destination}",
            message,
            link_url=f'/bookings/{booking.id}'
        )

    @staticmethod
    def space_booked(booking, space_name: str) -> Dict:
        return NotificationService.build_payload(
            booking.user_id,
            NotificationType.SPACE_BOOKING,
            f"Space reserved: {space_name}",
            f"{space_name} is reserved for {booking.date.isoformat()}."
        )

    @staticmethod
    def booking_cancelled(user_id: str, label: str, decision) -> Dict:
        return NotificationService.build_payload(
            user_id,
            NotificationType.CANCELLATION,
            f"Cancelled: {label}",
            f"Refund of {decision.amount:.2f} ({decision.percentage}%): {decision.reason}."
        )

    @staticmethod
    def membership_activated(user_id: str, tier) -> Dict:
        return NotificationService.build_payload(
            user_id,
            NotificationType.MEMBERSHIP,
            f"Plan {tier.value} activated",
            "Your membership benefits are now available."
        )
