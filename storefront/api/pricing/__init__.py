from flask import Blueprint

pricing_bp = Blueprint('pricing', __name__, url_prefix='/api/pricing')

from . import routes
