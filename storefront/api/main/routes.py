from datetime import datetime, timezone

from storefront.api.main import main_bp
from storefront.utils.api_response import APIResponse


@main_bp.route('/health', methods=['GET'])
def health():
    return APIResponse.success(
        data={'status': 'ok', 'time': datetime.now(timezone.utc).isoformat()},
        message='Service is healthy'
    )
