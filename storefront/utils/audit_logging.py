import logging
from flask import has_request_context, request

logger = logging.getLogger(__name__)


class AuditLogger:
    """Log important actions for audit trail"""

    @staticmethod
    def log_action(
        user_id: str,
        action: str,
        entity_type: str = None,
        entity_id: str = None,
        description: str = None,
        changes: dict = None
    ):
        """Log an action to audit trail"""
        from storefront.models import AuditLog
        from storefront.extensions import db

        ip_address = None
        user_agent = None
        if has_request_context():
            ip_address = request.remote_addr
            user_agent = request.headers.get('User-Agent', '')[:500]

        try:
            log = AuditLog(
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                description=description,
                changes=changes,
                ip_address=ip_address,
                user_agent=user_agent
            )
            db.session.add(log)
            db.session.commit()
            return log
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to log audit: {str(e)}")
            return None
